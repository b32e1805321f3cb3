"""
BackupScheduleUseCase - Declenchement planifie et retention des backups.

Responsabilite unique:
----------------------
Decider, a chaque tick, si un backup automatique doit etre lance, et
supprimer les artifacts qui depassent la retention.

Regles:
-------
- Declenchement au tick uniquement: aucun rattrapage des occurrences
  manquees pendant un arret.
- Au plus un backup planifie par minute (deduplication).
- Un echec est journalise et retente seulement a l'occurrence suivante.
- Aucun backup automatique pendant un reset ou une restauration.

Dependances:
------------
- SettingsRepository: Parametres du backup
- RunBackupUseCase: Executeur
- ArtifactStore: Liste et suppression des fichiers
- MaintenanceFlag: Signal "reset en cours"
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import List, Optional

import structlog

from pos_backoffice.application.use_cases.run_backup import (
    RunBackupRequest,
    RunBackupUseCase,
    utc_now,
)
from pos_backoffice.domain.entities.backup_artifact import BackupArtifact, BackupTrigger
from pos_backoffice.domain.exceptions import (
    ArtifactNotFoundError,
    BackupExecutionError,
    BackupInProgressError,
)
from pos_backoffice.domain.ports.artifact_store import ArtifactStore
from pos_backoffice.domain.ports.maintenance_flag import MaintenanceFlag
from pos_backoffice.domain.ports.settings_repository import SettingsRepository

logger = structlog.get_logger(__name__)


class TickOutcome(Enum):
    """Resultat d'une evaluation du scheduler."""

    DISABLED = "disabled"          # Backup automatique desactive
    NOT_DUE = "not_due"            # La minute courante ne correspond pas
    ALREADY_RAN = "already_ran"    # Deja execute pendant cette minute
    MAINTENANCE = "maintenance"    # Reset/restauration en cours
    BUSY = "busy"                  # Un autre backup est en cours
    BACKED_UP = "backed_up"        # Backup cree
    FAILED = "failed"              # Echec du dump


@dataclass
class TickResponse:
    """
    Reponse d'une evaluation.

    Attributes:
        outcome: Resultat de l'evaluation.
        artifact: Backup cree si outcome == BACKED_UP.
        swept: Fichiers supprimes par la retention apres le backup.
        error: Code d'erreur si outcome == FAILED.
    """
    outcome: TickOutcome
    artifact: Optional[BackupArtifact] = None
    swept: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class SweepResponse:
    """
    Reponse d'un passage de retention.

    Attributes:
        deleted: Noms des fichiers supprimes.
        kept: Nombre de fichiers conserves.
        retention_days: Retention appliquee.
    """
    deleted: List[str]
    kept: int
    retention_days: int


class BackupScheduleUseCase:
    """
    Scheduler des backups automatiques.

    Appele periodiquement par un timer (APScheduler). Les instants sont
    interpretes dans le fuseau `schedule_timezone`; un datetime naif
    est considere comme deja exprime dans ce fuseau.

    Example:
        >>> schedule = BackupScheduleUseCase(settings_repo, executor, store)
        >>> response = schedule.evaluate()
        >>> response.outcome
        <TickOutcome.NOT_DUE: 'not_due'>
    """

    def __init__(
        self,
        settings_repo: SettingsRepository,
        executor: RunBackupUseCase,
        artifact_store: ArtifactStore,
        maintenance_flag: Optional[MaintenanceFlag] = None,
        schedule_timezone: Optional[tzinfo] = None,
    ):
        """
        Initialise le use case.

        Args:
            settings_repo: Repository des parametres.
            executor: Executeur de backup.
            artifact_store: Stockage des artifacts.
            maintenance_flag: Drapeau de maintenance (optionnel).
            schedule_timezone: Fuseau du cron (defaut: UTC).
        """
        self._settings_repo = settings_repo
        self._executor = executor
        self._store = artifact_store
        self._maintenance_flag = maintenance_flag
        self._tz = schedule_timezone or timezone.utc
        self._last_run_key: Optional[str] = None
        self._key_lock = threading.Lock()

    @property
    def schedule_timezone(self) -> tzinfo:
        return self._tz

    def evaluate(self, now: Optional[datetime] = None) -> TickResponse:
        """
        Evalue le planning pour l'instant `now`.

        Args:
            now: Instant du tick (defaut: maintenant).

        Returns:
            TickResponse decrivant la decision prise.
        """
        moment = self._localize(now)
        settings = self._settings_repo.get_backup_settings()

        if not settings.auto_backup_enabled:
            return TickResponse(TickOutcome.DISABLED)

        if not settings.schedule.matches(moment):
            return TickResponse(TickOutcome.NOT_DUE)

        # Cle a la minute: un seul declenchement par occurrence
        run_key = moment.strftime("%Y-%m-%dT%H:%M")
        with self._key_lock:
            if self._last_run_key == run_key:
                return TickResponse(TickOutcome.ALREADY_RAN)
            self._last_run_key = run_key

        if self._maintenance_flag is not None and self._maintenance_flag.is_active():
            logger.warning("scheduled_backup_skipped_maintenance", run_key=run_key)
            return TickResponse(TickOutcome.MAINTENANCE)

        logger.info("scheduled_backup_triggered", run_key=run_key, schedule=str(settings.schedule))

        try:
            response = self._executor.execute(RunBackupRequest(BackupTrigger.SCHEDULED))
        except BackupInProgressError as e:
            logger.warning("scheduled_backup_skipped_busy", run_key=run_key)
            return TickResponse(TickOutcome.BUSY, error=e.code)
        except BackupExecutionError as e:
            # Pas de nouvel essai avant l'occurrence suivante
            logger.error("scheduled_backup_failed", run_key=run_key, code=e.code, reason=e.reason)
            return TickResponse(TickOutcome.FAILED, error=e.code)

        sweep = self.sweep_expired(moment)
        return TickResponse(
            TickOutcome.BACKED_UP,
            artifact=response.artifact,
            swept=sweep.deleted,
        )

    def sweep_expired(self, now: Optional[datetime] = None) -> SweepResponse:
        """
        Supprime les artifacts plus vieux que la retention.

        Un artifact est supprime si `now - created_at > retention_days`.

        Args:
            now: Instant de reference (defaut: maintenant).

        Returns:
            SweepResponse avec les fichiers supprimes.
        """
        moment = self._localize(now)
        retention_days = self._settings_repo.get_backup_settings().retention_days

        deleted: List[str] = []
        kept = 0

        for artifact in self._store.list():
            if not artifact.is_expired(moment, retention_days):
                kept += 1
                continue
            try:
                self._store.delete(artifact.filename)
            except ArtifactNotFoundError:
                # Supprime entre-temps (suppression manuelle concurrente)
                continue
            deleted.append(artifact.filename)

        if deleted:
            logger.info(
                "retention_sweep_completed",
                deleted_count=len(deleted),
                kept_count=kept,
                retention_days=retention_days,
            )

        return SweepResponse(deleted=deleted, kept=kept, retention_days=retention_days)

    def next_run(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """
        Prochaine occurrence du planning apres `now`.

        Returns:
            Datetime dans le fuseau du planning, ou None si le backup
            automatique est desactive.
        """
        settings = self._settings_repo.get_backup_settings()
        if not settings.auto_backup_enabled:
            return None
        return settings.schedule.next_after(self._localize(now))

    def _localize(self, now: Optional[datetime]) -> datetime:
        if now is None:
            return utc_now().astimezone(self._tz)
        if now.tzinfo is None:
            return now.replace(tzinfo=self._tz)
        return now.astimezone(self._tz)
