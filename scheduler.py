#!/usr/bin/env python3
"""
Worker APScheduler des backups automatiques.

Ce worker execute deux jobs en arriere-plan :
1. Evaluation du planning cron (toutes les SCHEDULE_TICK_SECONDS secondes)
2. Retention des backups (toutes les SWEEP_INTERVAL_MINUTES minutes)

Architecture:
-------------
Utilise APScheduler en mode BlockingScheduler. Le planning, la
retention et l'activation sont relus en base a chaque tick: une
modification depuis l'interface admin est prise en compte sans
redemarrage.

Deploiement:
------------
Deployer comme service "worker" separe de l'API, avec
SCHEDULER_ENABLED=false cote API pour ne pas lancer deux timers.
- Command: python scheduler.py
- Variables: DATABASE_URL, BACKUP_DIR, MAINTENANCE_FLAG_PATH

Le drapeau MAINTENANCE_FLAG_PATH doit etre partage avec l'API: pendant
un reset, le worker ne lance aucun backup automatique.

Arret propre:
-------------
Ctrl+C ou SIGTERM declenche scheduler.shutdown().
"""
import sys
from pathlib import Path

from apscheduler.schedulers.blocking import BlockingScheduler
from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

from pos_backoffice.infrastructure.backup.config import get_backup_config  # noqa: E402
from pos_backoffice.infrastructure.backup.scheduler import BackupScheduler  # noqa: E402
from pos_backoffice.infrastructure.container import Container  # noqa: E402
from pos_backoffice.infrastructure.logging import (  # noqa: E402
    configure_logging_from_env,
    get_logger,
)

logger = get_logger("worker")


def main() -> int:
    """Point d'entree principal du worker"""
    configure_logging_from_env()
    config = get_backup_config()

    try:
        container = Container.create(config)
    except Exception as e:
        logger.error("worker_startup_failed", error=str(e), error_type=type(e).__name__)
        return 1

    settings = container.settings_repository.get_backup_settings()
    logger.info(
        "worker_starting",
        auto_backup_enabled=settings.auto_backup_enabled,
        schedule=str(settings.schedule),
        retention_days=settings.retention_days,
        next_run=str(container.backup_schedule.next_run()),
    )

    # Retention immediate au demarrage
    container.backup_schedule.sweep_expired()

    scheduler = BackupScheduler(
        container.backup_schedule,
        tick_seconds=config.schedule_tick_seconds,
        sweep_interval_minutes=config.sweep_interval_minutes,
        scheduler=BlockingScheduler(timezone=config.timezone),
    )

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("worker_interrupted")
    finally:
        scheduler.stop()
        container.db.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
