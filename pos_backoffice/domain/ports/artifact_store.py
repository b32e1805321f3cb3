"""
Port ArtifactStore - Interface pour le stockage des fichiers de backup.

Responsabilite unique:
----------------------
CRUD durable sur les fichiers de backup.

Contrat:
--------
- Les noms sont valides (liste blanche) AVANT tout acces au stockage.
- Un fichier publie n'est jamais ecrase ni modifie.
- Les fichiers partiels (dump en cours) ne sont jamais listes.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, List

from pos_backoffice.domain.entities.backup_artifact import BackupArtifact
from pos_backoffice.domain.value_objects.backup_filename import BackupFilename


class ArtifactStore(ABC):
    """
    Interface du stockage des artifacts.

    Implementee par LocalArtifactStore.
    """

    @abstractmethod
    def list(self) -> List[BackupArtifact]:
        """Liste les artifacts, du plus recent au plus ancien."""
        ...

    @abstractmethod
    def get(self, filename: str) -> BackupArtifact:
        """
        Retourne les metadonnees d'un artifact.

        Raises:
            InvalidFilenameError: Nom hors liste blanche.
            ArtifactNotFoundError: Fichier absent.
        """
        ...

    @abstractmethod
    def open(self, filename: str) -> BinaryIO:
        """
        Ouvre un artifact en lecture binaire.

        Raises:
            InvalidFilenameError: Nom hors liste blanche.
            ArtifactNotFoundError: Fichier absent.
        """
        ...

    @abstractmethod
    def delete(self, filename: str) -> None:
        """
        Supprime un artifact (non idempotent).

        Raises:
            InvalidFilenameError: Nom hors liste blanche.
            ArtifactNotFoundError: Fichier absent.
        """
        ...

    @abstractmethod
    def partial_path(self, filename: BackupFilename) -> str:
        """Chemin ou l'outil de dump doit ecrire le fichier en cours."""
        ...

    @abstractmethod
    def publish(self, filename: BackupFilename) -> BackupArtifact:
        """
        Publie le fichier partiel sous son nom definitif.

        Raises:
            BackupExecutionError: Fichier partiel absent ou nom deja pris.
        """
        ...

    @abstractmethod
    def discard_partial(self, filename: BackupFilename) -> None:
        """Supprime le fichier partiel s'il existe."""
        ...
