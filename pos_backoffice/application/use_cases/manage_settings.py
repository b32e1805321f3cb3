"""
Use Cases de mise a jour des parametres.

Les mises a jour sont partielles: seuls les champs fournis sont
modifies, puis l'ensemble est valide avant d'etre persiste. Les
ecritures sont serialisees (la derniere gagne).
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict

import structlog

from pos_backoffice.domain.entities.settings import BackupSettings, ResetSettings
from pos_backoffice.domain.ports.settings_repository import SettingsRepository

logger = structlog.get_logger(__name__)


@dataclass
class UpdateSettingsRequest:
    """
    Requete de mise a jour partielle.

    Attributes:
        changes: Champs a modifier (None = inchange).
    """
    changes: Dict[str, Any] = field(default_factory=dict)


class UpdateBackupSettingsUseCase:
    """
    Mise a jour des parametres de backup.

    Example:
        >>> use_case = UpdateBackupSettingsUseCase(settings_repo)
        >>> use_case.execute(UpdateSettingsRequest({"retention_days": 14}))
    """

    def __init__(self, settings_repo: SettingsRepository, write_lock: threading.Lock = None):
        self._repo = settings_repo
        self._lock = write_lock or threading.Lock()

    def execute(self, request: UpdateSettingsRequest) -> BackupSettings:
        """
        Applique les changements.

        Raises:
            ValidationError: Un champ est invalide (rien n'est persiste).
        """
        with self._lock:
            updated = self._repo.get_backup_settings().merged(request.changes)
            saved = self._repo.save_backup_settings(updated)

        logger.info("backup_settings_updated", **saved.to_dict())
        return saved


class UpdateResetSettingsUseCase:
    """Mise a jour des parametres de reset."""

    def __init__(self, settings_repo: SettingsRepository, write_lock: threading.Lock = None):
        self._repo = settings_repo
        self._lock = write_lock or threading.Lock()

    def execute(self, request: UpdateSettingsRequest) -> ResetSettings:
        """
        Applique les changements.

        Raises:
            ValidationError: Un champ est invalide (rien n'est persiste).
        """
        with self._lock:
            updated = self._repo.get_reset_settings().merged(request.changes)
            saved = self._repo.save_reset_settings(updated)

        # Le code de confirmation n'est jamais journalise
        logger.info("reset_settings_updated", preserve_master_data=saved.preserve_master_data)
        return saved
