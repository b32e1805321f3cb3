"""
RunBackupUseCase - Execution d'un backup de la base.

Responsabilite unique:
----------------------
Produire UN fichier de backup et le publier dans l'ArtifactStore.

Regles:
-------
- Un seul backup a la fois par processus: une demande concurrente est
  rejetee (BackupInProgressError), jamais mise en file d'attente.
- Le dump est ecrit dans un fichier partiel puis publie: aucun fichier
  partiel ne survit a un echec.
- Un artifact existant n'est jamais ecrase.

Dependances:
------------
- ArtifactStore: Stockage des fichiers
- DatabaseDumper: Outil de dump (pg_dump)
"""

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from pos_backoffice.domain.entities.backup_artifact import BackupArtifact, BackupTrigger
from pos_backoffice.domain.exceptions import BackupExecutionError, BackupInProgressError
from pos_backoffice.domain.ports.artifact_store import ArtifactStore
from pos_backoffice.domain.ports.database_dumper import DatabaseDumper
from pos_backoffice.domain.value_objects.backup_filename import BackupFilename

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunBackupRequest:
    """
    Requete de backup.

    Attributes:
        trigger: Origine du backup.
    """
    trigger: BackupTrigger = BackupTrigger.MANUAL


@dataclass
class RunBackupResponse:
    """
    Reponse d'un backup reussi.

    Attributes:
        artifact: Fichier publie.
        trigger: Origine du backup.
        duration_seconds: Duree du dump.
    """
    artifact: BackupArtifact
    trigger: BackupTrigger
    duration_seconds: float


class RunBackupUseCase:
    """
    Executeur de backup.

    Partage par le scheduler, l'API (backup manuel) et les operations
    de maintenance (pre-reset, pre-restore).

    Example:
        >>> executor = RunBackupUseCase(store, pg_dump)
        >>> response = executor.execute(RunBackupRequest(BackupTrigger.MANUAL))
        >>> print(response.artifact.filename)
    """

    def __init__(
        self,
        artifact_store: ArtifactStore,
        dumper: DatabaseDumper,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialise le use case.

        Args:
            artifact_store: Stockage des artifacts.
            dumper: Outil de dump.
            clock: Source de l'heure courante (defaut: UTC systeme).
        """
        self._store = artifact_store
        self._dumper = dumper
        self._clock = clock or utc_now
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        """True si un backup est en cours."""
        return self._lock.locked()

    def execute(self, request: RunBackupRequest) -> RunBackupResponse:
        """
        Execute un backup.

        Args:
            request: Requete avec l'origine du backup.

        Returns:
            RunBackupResponse avec l'artifact publie.

        Raises:
            BackupInProgressError: Un backup est deja en cours.
            BackupExecutionError: Le dump a echoue.
            BackupTimeoutError: Le dump a depasse le delai.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("backup_rejected_in_progress", trigger=request.trigger.value)
            raise BackupInProgressError()

        try:
            return self._run(request.trigger)
        finally:
            self._lock.release()

    def _run(self, trigger: BackupTrigger) -> RunBackupResponse:
        filename = BackupFilename.for_timestamp(self._clock())
        started = time.perf_counter()

        logger.info("backup_started", filename=str(filename), trigger=trigger.value)

        try:
            self._dumper.dump(self._store.partial_path(filename))
            artifact = self._store.publish(filename)
        except BackupExecutionError as e:
            self._store.discard_partial(filename)
            logger.error(
                "backup_failed",
                filename=str(filename),
                trigger=trigger.value,
                code=e.code,
                reason=e.reason,
                diagnostics=e.diagnostics,
            )
            raise
        except BaseException:
            self._store.discard_partial(filename)
            raise

        duration = time.perf_counter() - started
        logger.info(
            "backup_completed",
            filename=artifact.filename,
            trigger=trigger.value,
            size_bytes=artifact.size_bytes,
            duration_seconds=round(duration, 3),
        )

        return RunBackupResponse(
            artifact=artifact,
            trigger=trigger,
            duration_seconds=duration,
        )
