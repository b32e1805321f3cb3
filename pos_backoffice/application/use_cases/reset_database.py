"""
ResetDatabaseUseCase - Reset destructif de la base POS.

Responsabilite unique:
----------------------
Vider les donnees transactionnelles (ou tout le schema) apres
confirmation et backup de securite.

Machine a etats:
----------------
    idle -> awaiting_confirmation -> running -> completed | failed -> idle

Garanties:
----------
- Code de confirmation faux: aucune modification, retour a idle.
- Aucune modification tant que le backup pre-reset n'a pas reussi.
- Chaque reset reussi ajoute exactement une entree au journal, qui
  reference le backup pre-reset.

Dependances:
------------
- SettingsRepository: Code de confirmation
- RunBackupUseCase: Backup pre-reset
- DataResetter: Phase destructive
- ResetLogRepository: Journal
- MaintenanceGuard: Exclusion avec la restauration
"""

import hmac
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

import structlog

from pos_backoffice.application.use_cases.maintenance import MaintenanceGuard
from pos_backoffice.application.use_cases.run_backup import (
    RunBackupRequest,
    RunBackupUseCase,
    utc_now,
)
from pos_backoffice.domain.entities.backup_artifact import BackupTrigger
from pos_backoffice.domain.entities.reset_log import ResetLogEntry, ResetResult, ResetState
from pos_backoffice.domain.exceptions import ConfirmationMismatchError, ResetExecutionError
from pos_backoffice.domain.ports.data_resetter import DataResetError, DataResetter
from pos_backoffice.domain.ports.reset_log_repository import ResetLogRepository
from pos_backoffice.domain.ports.settings_repository import SettingsRepository

logger = structlog.get_logger(__name__)


def tokens_match(given: str, expected: str) -> bool:
    """Comparaison a temps constant du code de confirmation."""
    if not isinstance(given, str):
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


@dataclass
class ResetDatabaseRequest:
    """
    Requete de reset.

    Attributes:
        confirmation_token: Code saisi par l'administrateur.
        preserve_master_data: Mode (None = valeur des parametres).
    """
    confirmation_token: str
    preserve_master_data: Optional[bool] = None


@dataclass
class ResetDatabaseResponse:
    """
    Reponse d'un reset reussi.

    Attributes:
        result: Resultat detaille (backup, comptages).
        log_entry: Entree ajoutee au journal.
    """
    result: ResetResult
    log_entry: ResetLogEntry

    @property
    def backup_filename(self) -> str:
        return self.result.backup_filename

    @property
    def summary(self) -> str:
        return self.result.summary


@dataclass
class ResetStatus:
    """
    Etat courant du controleur.

    Attributes:
        state: Etat de la machine.
        last_outcome: COMPLETED ou FAILED pour le dernier reset.
        last_backup_filename: Backup pre-reset du dernier reset.
        last_finished_at: Fin du dernier reset.
    """
    state: ResetState
    last_outcome: Optional[ResetState] = None
    last_backup_filename: Optional[str] = None
    last_finished_at: Optional[datetime] = None


class ResetDatabaseUseCase:
    """
    Controleur de reset.

    Example:
        >>> reset = ResetDatabaseUseCase(settings_repo, executor, resetter, log_repo, guard)
        >>> response = reset.execute(ResetDatabaseRequest("RESET-DB", True))
        >>> print(response.backup_filename)
    """

    def __init__(
        self,
        settings_repo: SettingsRepository,
        executor: RunBackupUseCase,
        resetter: DataResetter,
        log_repo: ResetLogRepository,
        guard: MaintenanceGuard,
    ):
        """
        Initialise le use case.

        Args:
            settings_repo: Repository des parametres (code de confirmation).
            executor: Executeur de backup.
            resetter: Phase destructive.
            log_repo: Journal des resets.
            guard: Garde de maintenance partagee.
        """
        self._settings_repo = settings_repo
        self._executor = executor
        self._resetter = resetter
        self._log_repo = log_repo
        self._guard = guard
        self._status = ResetStatus(state=ResetState.IDLE)
        self._status_lock = threading.Lock()

    @property
    def current_operation(self) -> Optional[str]:
        """Operation de maintenance en cours (reset ou restore)."""
        return self._guard.current_operation

    def status(self) -> ResetStatus:
        """Retourne une copie de l'etat courant."""
        with self._status_lock:
            return ResetStatus(**vars(self._status))

    def execute(self, request: ResetDatabaseRequest) -> ResetDatabaseResponse:
        """
        Execute le reset.

        Args:
            request: Code de confirmation et mode.

        Returns:
            ResetDatabaseResponse avec le backup et le resume.

        Raises:
            MaintenanceInProgressError: Reset ou restauration deja en cours.
            ConfirmationMismatchError: Code incorrect (aucune modification).
            BackupExecutionError: Backup pre-reset echoue (reset refuse).
            ResetExecutionError: Phase destructive echouee.
        """
        with self._guard.hold("reset"):
            try:
                return self._run(request)
            finally:
                self._set_state(ResetState.IDLE)

    def _run(self, request: ResetDatabaseRequest) -> ResetDatabaseResponse:
        self._set_state(ResetState.AWAITING_CONFIRMATION)

        settings = self._settings_repo.get_reset_settings()
        if not tokens_match(request.confirmation_token, settings.confirmation_code):
            logger.warning("reset_confirmation_mismatch")
            raise ConfirmationMismatchError()

        preserve = (
            settings.preserve_master_data
            if request.preserve_master_data is None
            else request.preserve_master_data
        )

        try:
            backup = self._executor.execute(RunBackupRequest(BackupTrigger.PRE_RESET))
        except Exception:
            logger.error("reset_refused_backup_failed", preserve_master_data=preserve)
            raise

        backup_filename = backup.artifact.filename
        self._set_state(ResetState.RUNNING)
        logger.warning(
            "reset_started",
            backup_filename=backup_filename,
            preserve_master_data=preserve,
        )

        try:
            rows_before = self._resetter.count_rows()
            self._resetter.reset(preserve_master_data=preserve)
        except DataResetError as e:
            self._fail(backup_filename, e.reason, e.rolled_back)
            raise ResetExecutionError(backup_filename, e.reason, e.rolled_back) from e

        # La suppression est validee: plus aucune annulation possible
        try:
            rows_after = self._resetter.count_rows()
            summary = build_summary(backup_filename, preserve, rows_before, rows_after)
            result = ResetResult(
                backup_filename=backup_filename,
                summary=summary,
                preserve_master_data=preserve,
                rows_before=rows_before,
                rows_after=rows_after,
            )
            entry = self._log_repo.append(
                ResetLogEntry(
                    content=summary,
                    backup_filename=backup_filename,
                    preserve_master_data=preserve,
                )
            )
        except Exception as e:
            reason = (
                e.reason
                if isinstance(e, DataResetError)
                else f"journalisation du reset impossible ({type(e).__name__})"
            )
            self._fail(backup_filename, reason, rolled_back=False)
            raise ResetExecutionError(backup_filename, reason, rolled_back=False) from e

        self._finish(ResetState.COMPLETED, backup_filename)
        logger.info(
            "reset_completed",
            backup_filename=backup_filename,
            preserve_master_data=preserve,
            rows_deleted=result.rows_deleted,
        )

        return ResetDatabaseResponse(result=result, log_entry=entry)

    def _set_state(self, state: ResetState) -> None:
        with self._status_lock:
            self._status.state = state

    def _fail(self, backup_filename: str, reason: str, rolled_back: bool) -> None:
        self._finish(ResetState.FAILED, backup_filename)
        logger.error(
            "reset_failed",
            backup_filename=backup_filename,
            reason=reason,
            rolled_back=rolled_back,
        )

    def _finish(self, outcome: ResetState, backup_filename: str) -> None:
        # completed | failed -> idle, le resultat reste consultable
        with self._status_lock:
            self._status = ResetStatus(
                state=ResetState.IDLE,
                last_outcome=outcome,
                last_backup_filename=backup_filename,
                last_finished_at=utc_now(),
            )


def build_summary(
    backup_filename: str,
    preserve_master_data: bool,
    rows_before: Dict[str, int],
    rows_after: Dict[str, int],
) -> str:
    """Resume lisible ecrit dans le journal des resets."""
    mode = (
        "conservation des donnees de reference"
        if preserve_master_data
        else "reinitialisation complete"
    )
    lines = [
        f"Reset de la base termine (mode: {mode})",
        f"Backup pre-reset: {backup_filename}",
        "",
        "Lignes par table (avant -> apres):",
    ]
    for table in sorted(set(rows_before) | set(rows_after)):
        lines.append(f"  {table}: {rows_before.get(table, 0)} -> {rows_after.get(table, 0)}")
    return "\n".join(lines)
