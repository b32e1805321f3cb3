"""
Logging Infrastructure - Logging structure avec structlog.

Usage:
------
    from pos_backoffice.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("reset_completed", backup_filename="backup-...backup")
"""

from pos_backoffice.infrastructure.logging.config import (
    RequestLogger,
    configure_logging,
    configure_logging_from_env,
    get_logger,
)

__all__ = ["RequestLogger", "configure_logging", "configure_logging_from_env", "get_logger"]
