"""
Use Cases du cycle de vie des sauvegardes.

Pattern Command:
----------------
Chaque use case recoit une Request et retourne une Response.
Les dependances sont injectees via le constructeur.
"""

from pos_backoffice.application.use_cases.backup_schedule import (
    BackupScheduleUseCase,
    SweepResponse,
    TickOutcome,
    TickResponse,
)
from pos_backoffice.application.use_cases.maintenance import MaintenanceGuard
from pos_backoffice.application.use_cases.manage_settings import (
    UpdateBackupSettingsUseCase,
    UpdateResetSettingsUseCase,
    UpdateSettingsRequest,
)
from pos_backoffice.application.use_cases.reset_database import (
    ResetDatabaseRequest,
    ResetDatabaseResponse,
    ResetDatabaseUseCase,
    ResetStatus,
)
from pos_backoffice.application.use_cases.restore_backup import (
    RestoreBackupRequest,
    RestoreBackupResponse,
    RestoreBackupUseCase,
)
from pos_backoffice.application.use_cases.run_backup import (
    RunBackupRequest,
    RunBackupResponse,
    RunBackupUseCase,
)

__all__ = [
    "BackupScheduleUseCase",
    "SweepResponse",
    "TickOutcome",
    "TickResponse",
    "MaintenanceGuard",
    "UpdateBackupSettingsUseCase",
    "UpdateResetSettingsUseCase",
    "UpdateSettingsRequest",
    "ResetDatabaseRequest",
    "ResetDatabaseResponse",
    "ResetDatabaseUseCase",
    "ResetStatus",
    "RestoreBackupRequest",
    "RestoreBackupResponse",
    "RestoreBackupUseCase",
    "RunBackupRequest",
    "RunBackupResponse",
    "RunBackupUseCase",
]
