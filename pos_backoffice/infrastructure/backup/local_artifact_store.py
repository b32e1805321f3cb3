"""
LocalArtifactStore - Stockage des backups sur le disque local.

Responsabilite unique:
----------------------
Lister, ouvrir, supprimer et publier les fichiers de backup d'un
repertoire.

Regles:
-------
- Tout nom recu de l'exterieur passe par BackupFilename (liste blanche)
  avant de toucher le systeme de fichiers.
- Les fichiers partiels (".<nom>.partial") ne sont jamais listes.
- La publication echoue plutot que d'ecraser un fichier existant.
"""

import os
import threading
from pathlib import Path
from typing import BinaryIO, List, Union

from pos_backoffice.domain.entities.backup_artifact import BackupArtifact
from pos_backoffice.domain.exceptions import ArtifactNotFoundError, BackupExecutionError
from pos_backoffice.domain.ports.artifact_store import ArtifactStore
from pos_backoffice.domain.value_objects.backup_filename import BackupFilename
from pos_backoffice.infrastructure.logging import get_logger

logger = get_logger(__name__)

PARTIAL_SUFFIX = ".partial"


class LocalArtifactStore(ArtifactStore):
    """
    Implementation ArtifactStore sur un repertoire local.

    Example:
        >>> store = LocalArtifactStore("./backup")
        >>> [a.filename for a in store.list()]
        ['backup-2024-03-15T08-00-00-000Z.backup']
    """

    def __init__(self, directory: Union[str, Path]):
        """
        Initialise le stockage.

        Args:
            directory: Repertoire des backups (cree si absent).
        """
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._publish_lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._dir

    def list(self) -> List[BackupArtifact]:
        artifacts = []

        for path in self._dir.iterdir():
            if not BackupFilename.is_valid(path.name):
                continue
            try:
                artifacts.append(self._artifact(BackupFilename(path.name), path))
            except FileNotFoundError:
                # Supprime pendant le parcours
                continue

        artifacts.sort(key=lambda a: (a.created_at, a.filename), reverse=True)
        return artifacts

    def get(self, filename: str) -> BackupArtifact:
        name = BackupFilename(filename)
        path = self._dir / name.value
        try:
            return self._artifact(name, path)
        except FileNotFoundError:
            raise ArtifactNotFoundError(name.value) from None

    def open(self, filename: str) -> BinaryIO:
        name = BackupFilename(filename)
        try:
            return (self._dir / name.value).open("rb")
        except FileNotFoundError:
            raise ArtifactNotFoundError(name.value) from None

    def delete(self, filename: str) -> None:
        name = BackupFilename(filename)
        try:
            (self._dir / name.value).unlink()
        except FileNotFoundError:
            raise ArtifactNotFoundError(name.value) from None

        logger.info("backup_deleted", filename=name.value)

    def partial_path(self, filename: BackupFilename) -> str:
        return str(self._dir / f".{filename.value}{PARTIAL_SUFFIX}")

    def publish(self, filename: BackupFilename) -> BackupArtifact:
        partial = Path(self.partial_path(filename))
        target = self._dir / filename.value

        with self._publish_lock:
            if not partial.is_file():
                raise BackupExecutionError("le dump n'a produit aucun fichier")
            if target.exists():
                raise BackupExecutionError(f"le fichier '{filename.value}' existe deja")
            os.replace(partial, target)

        return self._artifact(filename, target)

    def discard_partial(self, filename: BackupFilename) -> None:
        Path(self.partial_path(filename)).unlink(missing_ok=True)

    def cleanup_partials(self) -> int:
        """
        Supprime les fichiers partiels laisses par un arret brutal.

        A appeler au demarrage, avant tout backup.

        Returns:
            Nombre de fichiers supprimes.
        """
        removed = 0
        for path in self._dir.glob(f".backup-*{PARTIAL_SUFFIX}"):
            path.unlink(missing_ok=True)
            removed += 1

        if removed:
            logger.warning("stale_partials_removed", count=removed)
        return removed

    def _artifact(self, name: BackupFilename, path: Path) -> BackupArtifact:
        return BackupArtifact(
            filename=name.value,
            size_bytes=path.stat().st_size,
            created_at=name.created_at,
            storage_path=str(path),
        )
