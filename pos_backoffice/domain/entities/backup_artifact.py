"""
BackupArtifact Entity - Fichier de backup produit par l'executeur.

Responsabilite unique:
----------------------
Representer un fichier de backup et sa politique d'expiration.

Un artifact est immuable: il est cree par l'executeur puis supprime
(explicitement ou par la retention), jamais modifie.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


class BackupTrigger(Enum):
    """Origine d'un backup."""

    MANUAL = "manual"            # Declenche depuis l'interface admin
    SCHEDULED = "scheduled"      # Declenche par le scheduler
    PRE_RESET = "pre_reset"      # Force avant un reset
    PRE_RESTORE = "pre_restore"  # Force avant une restauration


@dataclass(frozen=True)
class BackupArtifact:
    """
    Entite BackupArtifact.

    Attributes:
        filename: Nom unique derive de l'horodatage.
        size_bytes: Taille du fichier.
        created_at: Date de creation (UTC, lue dans le nom).
        storage_path: Chemin physique (propriete de l'ArtifactStore).
    """

    filename: str
    size_bytes: int
    created_at: datetime
    storage_path: str

    def age(self, now: datetime) -> timedelta:
        """Age de l'artifact a l'instant `now` (naif = UTC)."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now - self.created_at

    def is_expired(self, now: datetime, retention_days: int) -> bool:
        """True si l'artifact depasse strictement la retention."""
        return self.age(now) > timedelta(days=retention_days)

    def to_dict(self) -> dict:
        """Representation pour l'API (sans le chemin physique)."""
        return {
            "filename": self.filename,
            "size_bytes": self.size_bytes,
            "created_at": self.created_at,
        }
