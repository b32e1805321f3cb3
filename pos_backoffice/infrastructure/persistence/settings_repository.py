"""
SqlAlchemySettingsRepository - Parametres dans la table app_settings.

Implemente le port SettingsRepository.

Chaque groupe de parametres est stocke en JSON sous une cle:
    backup_settings -> {"auto_backup_enabled": ..., "schedule": ..., ...}
    reset_settings  -> {"confirmation_code": ..., "preserve_master_data": ...}

Une valeur stockee devenue invalide (edition manuelle, ancienne
version) n'empeche pas le demarrage: la derniere valeur valide lue
par ce processus est utilisee, a defaut les valeurs par defaut.
"""

import json
import threading
from typing import Any, Callable, Dict, Optional, TypeVar

from pos_backoffice.domain.entities.settings import BackupSettings, ResetSettings
from pos_backoffice.domain.exceptions import ValidationError
from pos_backoffice.domain.ports.settings_repository import SettingsRepository
from pos_backoffice.infrastructure.logging import get_logger
from pos_backoffice.infrastructure.persistence.database import DatabaseManager
from pos_backoffice.infrastructure.persistence.models import AppSettings

logger = get_logger(__name__)

BACKUP_SETTINGS_KEY = "backup_settings"
RESET_SETTINGS_KEY = "reset_settings"

T = TypeVar("T")


class SqlAlchemySettingsRepository(SettingsRepository):
    """
    Repository SQLAlchemy pour les parametres.

    Attributes:
        db: DatabaseManager pour les sessions.
    """

    def __init__(self, db: DatabaseManager):
        """
        Initialise le repository.

        Args:
            db: Instance DatabaseManager.
        """
        self._db = db
        self._write_lock = threading.Lock()
        self._last_good: Dict[str, Any] = {}

    def get_backup_settings(self) -> BackupSettings:
        return self._load(BACKUP_SETTINGS_KEY, BackupSettings, BackupSettings.from_dict)

    def save_backup_settings(self, settings: BackupSettings) -> BackupSettings:
        self._store(BACKUP_SETTINGS_KEY, settings.to_dict(), "Parametres du backup automatique")
        self._last_good[BACKUP_SETTINGS_KEY] = settings
        return settings

    def get_reset_settings(self) -> ResetSettings:
        return self._load(RESET_SETTINGS_KEY, ResetSettings, ResetSettings.from_dict)

    def save_reset_settings(self, settings: ResetSettings) -> ResetSettings:
        self._store(RESET_SETTINGS_KEY, settings.to_dict(), "Parametres du reset de la base")
        self._last_good[RESET_SETTINGS_KEY] = settings
        return settings

    # ─────────────────────────────────────────────────────────────
    # Internes
    # ─────────────────────────────────────────────────────────────

    def _load(self, key: str, default: Callable[[], T], parse: Callable[[dict], T]) -> T:
        raw = self._read(key)

        if raw is None:
            # Premier acces: creation avec les valeurs par defaut
            settings = default()
            self._store(key, settings.to_dict(), None, only_if_missing=True)
            self._last_good[key] = settings
            return settings

        try:
            settings = parse(json.loads(raw))
        except (ValueError, TypeError, AttributeError, ValidationError) as e:
            fallback: Optional[T] = self._last_good.get(key)
            logger.warning(
                "stored_settings_invalid",
                key=key,
                error=str(e),
                fallback="last_known_good" if fallback is not None else "defaults",
            )
            return fallback if fallback is not None else default()

        self._last_good[key] = settings
        return settings

    def _read(self, key: str) -> Optional[str]:
        with self._db.get_session() as session:
            row = session.query(AppSettings).filter(AppSettings.key == key).first()
            return row.value if row else None

    def _store(
        self,
        key: str,
        value: Dict[str, Any],
        description: Optional[str],
        only_if_missing: bool = False,
    ) -> None:
        payload = json.dumps(value)

        with self._write_lock, self._db.get_session() as session:
            row = session.query(AppSettings).filter(AppSettings.key == key).first()
            if row is None:
                session.add(AppSettings(key=key, value=payload, description=description))
            elif not only_if_missing:
                row.value = payload
