"""
Backup Schemas - Modeles Pydantic des endpoints de backup.

Responsabilite unique:
----------------------
Definir les schemas de requete/reponse pour /backup.

La validation metier (cron, retention, destination) reste dans le
domaine: les schemas ne controlent que les types.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


class BackupSettingsResponse(BaseModel):
    """
    Parametres du backup automatique.

    Example:
        {
            "auto_backup_enabled": true,
            "schedule": "0 0 * * *",
            "retention_days": 7,
            "destination": "local"
        }
    """

    auto_backup_enabled: bool
    schedule: str
    retention_days: int
    destination: str


class BackupSettingsUpdate(BaseModel):
    """
    Mise a jour partielle des parametres (champs absents = inchanges).

    Example:
        {"schedule": "30 2 * * *", "retention_days": 14}
    """

    model_config = ConfigDict(extra="forbid")

    auto_backup_enabled: Optional[StrictBool] = None
    schedule: Optional[str] = None
    retention_days: Optional[StrictInt] = None
    destination: Optional[str] = None


class ArtifactResponse(BaseModel):
    """Fichier de backup."""

    filename: str
    size_bytes: int
    created_at: datetime


class ArtifactListResponse(BaseModel):
    """Liste des backups, du plus recent au plus ancien."""

    backups: List[ArtifactResponse]
    total: int


class DeleteResponse(BaseModel):
    """Confirmation de suppression."""

    success: bool = True
    filename: str


class ScheduleStatusResponse(BaseModel):
    """
    Etat du planning.

    Attributes:
        next_run: Prochaine occurrence (None si desactive).
        scheduler_running: Timer actif dans ce processus.
    """

    auto_backup_enabled: bool
    schedule: str
    timezone: str
    next_run: Optional[datetime] = None
    scheduler_running: bool


class RestoreRequest(BaseModel):
    """
    Requete de restauration.

    Example:
        {"confirmation_token": "RESET-DB", "clean": true}
    """

    confirmation_token: str = Field(..., min_length=1)
    clean: bool = True


class RestoreResponse(BaseModel):
    """Resultat d'une restauration."""

    restored_filename: str
    backup_filename: str
    clean: bool
