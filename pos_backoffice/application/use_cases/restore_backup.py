"""
RestoreBackupUseCase - Restauration d'un backup.

Responsabilite unique:
----------------------
Remplacer le contenu de la base par celui d'un artifact existant.

Garanties:
----------
- Le nom est valide et le fichier existe avant toute autre action.
- Meme code de confirmation que le reset.
- Un backup pre-restore est cree avant pg_restore: l'etat courant
  reste recuperable si la restauration echoue.
"""

from dataclasses import dataclass

import structlog

from pos_backoffice.application.use_cases.maintenance import MaintenanceGuard
from pos_backoffice.application.use_cases.reset_database import tokens_match
from pos_backoffice.application.use_cases.run_backup import RunBackupRequest, RunBackupUseCase
from pos_backoffice.domain.entities.backup_artifact import BackupTrigger
from pos_backoffice.domain.exceptions import (
    BackupExecutionError,
    ConfirmationMismatchError,
    RestoreExecutionError,
)
from pos_backoffice.domain.ports.artifact_store import ArtifactStore
from pos_backoffice.domain.ports.database_dumper import DatabaseDumper
from pos_backoffice.domain.ports.settings_repository import SettingsRepository

logger = structlog.get_logger(__name__)


@dataclass
class RestoreBackupRequest:
    """
    Requete de restauration.

    Attributes:
        filename: Artifact a restaurer.
        confirmation_token: Code saisi par l'administrateur.
        clean: Vider les objets existants avant la restauration.
    """
    filename: str
    confirmation_token: str
    clean: bool = True


@dataclass
class RestoreBackupResponse:
    """
    Reponse d'une restauration reussie.

    Attributes:
        restored_filename: Artifact restaure.
        backup_filename: Backup pre-restore.
        clean: Mode utilise.
    """
    restored_filename: str
    backup_filename: str
    clean: bool


class RestoreBackupUseCase:
    """
    Use case de restauration.

    Example:
        >>> restore = RestoreBackupUseCase(store, executor, pg, settings_repo, guard)
        >>> restore.execute(RestoreBackupRequest("backup-...backup", "RESET-DB"))
    """

    def __init__(
        self,
        artifact_store: ArtifactStore,
        executor: RunBackupUseCase,
        dumper: DatabaseDumper,
        settings_repo: SettingsRepository,
        guard: MaintenanceGuard,
    ):
        self._store = artifact_store
        self._executor = executor
        self._dumper = dumper
        self._settings_repo = settings_repo
        self._guard = guard

    def execute(self, request: RestoreBackupRequest) -> RestoreBackupResponse:
        """
        Execute la restauration.

        Raises:
            InvalidFilenameError: Nom hors liste blanche.
            ArtifactNotFoundError: Fichier absent.
            MaintenanceInProgressError: Reset ou restauration en cours.
            ConfirmationMismatchError: Code incorrect.
            BackupExecutionError: Backup pre-restore echoue (refus).
            RestoreExecutionError: pg_restore a echoue.
        """
        artifact = self._store.get(request.filename)

        with self._guard.hold("restore"):
            settings = self._settings_repo.get_reset_settings()
            if not tokens_match(request.confirmation_token, settings.confirmation_code):
                logger.warning("restore_confirmation_mismatch", filename=artifact.filename)
                raise ConfirmationMismatchError()

            backup = self._executor.execute(RunBackupRequest(BackupTrigger.PRE_RESTORE))
            backup_filename = backup.artifact.filename

            logger.warning(
                "restore_started",
                filename=artifact.filename,
                backup_filename=backup_filename,
                clean=request.clean,
            )

            try:
                self._dumper.restore(artifact.storage_path, clean=request.clean)
            except BackupExecutionError as e:
                logger.error(
                    "restore_failed",
                    filename=artifact.filename,
                    backup_filename=backup_filename,
                    reason=e.reason,
                    diagnostics=e.diagnostics,
                )
                raise RestoreExecutionError(artifact.filename, backup_filename, e.reason) from e

            logger.info("restore_completed", filename=artifact.filename, backup_filename=backup_filename)

            return RestoreBackupResponse(
                restored_filename=artifact.filename,
                backup_filename=backup_filename,
                clean=request.clean,
            )
