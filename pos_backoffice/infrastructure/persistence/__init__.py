"""
Persistence Infrastructure - Adapters SQLAlchemy.

Contenu:
--------
- database.py: DatabaseManager (engine, sessions)
- models/: Tables d'administration et schema du point de vente
- settings_repository.py: Parametres (app_settings)
- reset_log_repository.py: Journal des resets (reset_logs)
- data_resetter.py: Phase destructive du reset
"""

from pos_backoffice.infrastructure.persistence.data_resetter import SqlAlchemyDataResetter
from pos_backoffice.infrastructure.persistence.database import DatabaseManager
from pos_backoffice.infrastructure.persistence.reset_log_repository import (
    SqlAlchemyResetLogRepository,
)
from pos_backoffice.infrastructure.persistence.settings_repository import (
    SqlAlchemySettingsRepository,
)

__all__ = [
    "DatabaseManager",
    "SqlAlchemyDataResetter",
    "SqlAlchemyResetLogRepository",
    "SqlAlchemySettingsRepository",
]
