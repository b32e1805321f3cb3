"""
Reset Entities - Journal et etat des resets de la base.

Responsabilite unique:
----------------------
Representer l'etat du controleur de reset et l'historique des resets.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ResetState(Enum):
    """Etats du controleur de reset."""

    IDLE = "idle"                                    # Aucun reset en cours
    AWAITING_CONFIRMATION = "awaiting_confirmation"  # Verification du code
    RUNNING = "running"                              # Phase destructive
    COMPLETED = "completed"                          # Termine avec succes
    FAILED = "failed"                                # Termine avec erreur


@dataclass(frozen=True)
class ResetLogEntry:
    """
    Entree du journal des resets (append-only).

    Attributes:
        content: Resume lisible de l'operation.
        backup_filename: Backup pre-reset de reference.
        preserve_master_data: Mode utilise.
        created_at: Date de l'entree (UTC).
        id: Identifiant attribue par la persistence.
    """

    content: str
    backup_filename: str
    preserve_master_data: bool
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[int] = None


@dataclass(frozen=True)
class ResetResult:
    """
    Resultat d'un reset reussi.

    Attributes:
        backup_filename: Backup pre-reset.
        summary: Resume lisible (aussi ecrit dans le journal).
        preserve_master_data: Mode utilise.
        rows_before: Nombre de lignes par table avant.
        rows_after: Nombre de lignes par table apres.
    """

    backup_filename: str
    summary: str
    preserve_master_data: bool
    rows_before: dict[str, int] = field(default_factory=dict)
    rows_after: dict[str, int] = field(default_factory=dict)

    @property
    def rows_deleted(self) -> int:
        """Total des lignes supprimees."""
        return sum(
            max(0, count - self.rows_after.get(table, 0))
            for table, count in self.rows_before.items()
        )
