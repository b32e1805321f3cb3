"""
Domain Layer - Coeur metier du cycle de vie des sauvegardes.

Ce module contient:
    - entities/: Artifacts de backup, parametres, journal des resets
    - value_objects/: Objets valeur immuables (CronExpression, BackupFilename)
    - ports/: Interfaces implementees par l'infrastructure
    - exceptions: Exceptions metier

Principes:
    - AUCUNE dependance vers les couches externes
    - Logique metier pure
    - Testable sans infrastructure
"""

from pos_backoffice.domain.exceptions import (
    ArtifactNotFoundError,
    BackupExecutionError,
    BackupInProgressError,
    BackupTimeoutError,
    ConfirmationMismatchError,
    DomainException,
    InvalidCronExpressionError,
    InvalidFilenameError,
    MaintenanceInProgressError,
    ResetExecutionError,
    RestoreExecutionError,
    ValidationError,
)

__all__ = [
    "DomainException",
    "ValidationError",
    "InvalidCronExpressionError",
    "BackupExecutionError",
    "BackupTimeoutError",
    "BackupInProgressError",
    "InvalidFilenameError",
    "ArtifactNotFoundError",
    "ConfirmationMismatchError",
    "MaintenanceInProgressError",
    "ResetExecutionError",
    "RestoreExecutionError",
]
