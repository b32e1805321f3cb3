"""
Reset Schemas - Modeles Pydantic des endpoints de reset.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class ResetSettingsResponse(BaseModel):
    """
    Parametres du reset.

    Example:
        {"confirmation_code": "RESET-DB", "preserve_master_data": true}
    """

    confirmation_code: str
    preserve_master_data: bool


class ResetSettingsUpdate(BaseModel):
    """Mise a jour partielle des parametres du reset."""

    model_config = ConfigDict(extra="forbid")

    confirmation_code: Optional[str] = None
    preserve_master_data: Optional[StrictBool] = None


class ResetRequest(BaseModel):
    """
    Requete de reset.

    Example:
        {"confirmation_token": "RESET-DB", "preserve_master_data": true}
    """

    confirmation_token: str = Field(..., min_length=1)
    preserve_master_data: Optional[StrictBool] = None


class ResetResponse(BaseModel):
    """
    Resultat d'un reset reussi.

    Attributes:
        backup_filename: Backup pre-reset (permet de revenir en arriere).
        summary: Resume ecrit dans le journal.
    """

    backup_filename: str
    summary: str
    preserve_master_data: bool
    rows_before: Dict[str, int]
    rows_after: Dict[str, int]
    rows_deleted: int
    log_id: Optional[int] = None


class ResetStatusResponse(BaseModel):
    """Etat du controleur de reset."""

    state: str
    current_operation: Optional[str] = None
    last_outcome: Optional[str] = None
    last_backup_filename: Optional[str] = None
    last_finished_at: Optional[datetime] = None


class ResetLogResponse(BaseModel):
    """Entree du journal des resets."""

    id: Optional[int] = None
    created_at: datetime
    backup_filename: str
    preserve_master_data: bool
    content: str


class ResetLogListResponse(BaseModel):
    """Journal des resets, du plus recent au plus ancien."""

    logs: List[ResetLogResponse]
    total: int
