"""
Entites du domaine.

Les entites representent les objets du cycle de vie des sauvegardes:
fichiers de backup, parametres persistants et journal des resets.
"""

from pos_backoffice.domain.entities.backup_artifact import BackupArtifact, BackupTrigger
from pos_backoffice.domain.entities.reset_log import ResetLogEntry, ResetResult, ResetState
from pos_backoffice.domain.entities.settings import (
    BackupDestination,
    BackupSettings,
    ResetSettings,
)

__all__ = [
    "BackupArtifact",
    "BackupTrigger",
    "BackupDestination",
    "BackupSettings",
    "ResetSettings",
    "ResetLogEntry",
    "ResetResult",
    "ResetState",
]
