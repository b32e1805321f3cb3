"""
BackupScheduler - Timer APScheduler du backup automatique.

Responsabilite unique:
----------------------
Appeler periodiquement BackupScheduleUseCase:
    - evaluate() toutes les `tick_seconds` secondes
    - sweep_expired() toutes les `sweep_interval_minutes` minutes

Le planning cron lui-meme est relu en base a chaque tick: une
modification depuis l'interface est prise en compte sans redemarrage.

Usage:
------
    scheduler = BackupScheduler(schedule_use_case)
    scheduler.start()  # Demarre en arriere-plan
    scheduler.stop()   # Arrete le scheduler
"""

from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from pos_backoffice.application.use_cases.backup_schedule import BackupScheduleUseCase
from pos_backoffice.infrastructure.logging import get_logger

logger = get_logger(__name__)

TICK_JOB_ID = "backup_tick"
SWEEP_JOB_ID = "retention_sweep"


class BackupScheduler:
    """
    Planificateur des backups automatiques.

    Les deux jobs ont max_instances=1 et coalesce=True: un tick en
    retard n'est jamais execute deux fois.
    """

    def __init__(
        self,
        schedule: BackupScheduleUseCase,
        tick_seconds: int = 30,
        sweep_interval_minutes: int = 60,
        scheduler: Optional[BaseScheduler] = None,
    ):
        """
        Initialise le scheduler.

        Args:
            schedule: Use case de planification.
            tick_seconds: Intervalle d'evaluation du cron (<= 60).
            sweep_interval_minutes: Intervalle de la retention.
            scheduler: Scheduler APScheduler (defaut: BackgroundScheduler).
        """
        self._schedule = schedule
        self._tick_seconds = tick_seconds
        self._sweep_minutes = sweep_interval_minutes
        self._scheduler = scheduler or BackgroundScheduler(timezone=schedule.schedule_timezone)
        self._running = False

    def configure(self) -> None:
        """Enregistre les jobs sans demarrer le scheduler."""
        self._scheduler.add_job(
            self._tick,
            trigger=IntervalTrigger(seconds=self._tick_seconds),
            id=TICK_JOB_ID,
            name="Evaluation du planning de backup",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.add_job(
            self._sweep,
            trigger=IntervalTrigger(minutes=self._sweep_minutes),
            id=SWEEP_JOB_ID,
            name="Retention des backups",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    def start(self) -> None:
        """
        Demarre le scheduler.

        Bloquant si le scheduler fourni est un BlockingScheduler.
        """
        if self._running:
            logger.warning("scheduler_already_running")
            return

        self.configure()
        self._running = True
        logger.info(
            "scheduler_started",
            tick_seconds=self._tick_seconds,
            sweep_interval_minutes=self._sweep_minutes,
        )
        self._scheduler.start()

    def stop(self) -> None:
        """Arrete le scheduler."""
        if not self._running:
            return

        self._scheduler.shutdown(wait=True)
        self._running = False

        logger.info("scheduler_stopped")

    @property
    def is_running(self) -> bool:
        """Retourne True si le scheduler est actif."""
        return self._running

    def next_backup(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """Prochaine occurrence du planning cron."""
        return self._schedule.next_run(now)

    def _tick(self) -> None:
        try:
            response = self._schedule.evaluate()
        except Exception:
            logger.exception("scheduler_tick_failed")
            return

        if response.artifact is not None:
            logger.info(
                "scheduled_backup_completed",
                filename=response.artifact.filename,
                swept=len(response.swept),
            )

    def _sweep(self) -> None:
        try:
            self._schedule.sweep_expired()
        except Exception:
            logger.exception("retention_sweep_failed")
