"""
MaintenanceGuard - Exclusion mutuelle des operations destructives.

Un seul reset ou une seule restauration a la fois. Tant que la garde
est tenue, le drapeau de maintenance est leve pour que le scheduler
(eventuellement dans un autre processus) suspende les backups
automatiques.

Le drapeau est rafraichi toutes les `heartbeat_seconds` pendant
l'operation: un dump plus long que le delai de peremption ne le fait
pas passer pour abandonne.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from pos_backoffice.domain.exceptions import MaintenanceInProgressError
from pos_backoffice.domain.ports.maintenance_flag import MaintenanceFlag

logger = structlog.get_logger(__name__)


class MaintenanceGuard:
    """
    Garde partagee par ResetDatabaseUseCase et RestoreBackupUseCase.

    Example:
        >>> guard = MaintenanceGuard(flag, heartbeat_seconds=150)
        >>> with guard.hold("reset"):
        ...     pass
    """

    def __init__(
        self,
        flag: Optional[MaintenanceFlag] = None,
        heartbeat_seconds: Optional[float] = None,
    ):
        self._flag = flag
        self._heartbeat_seconds = heartbeat_seconds
        self._lock = threading.Lock()
        self._operation: Optional[str] = None

    @property
    def current_operation(self) -> Optional[str]:
        """Operation en cours, None si aucune."""
        return self._operation

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        """
        Tient la garde pendant `operation`.

        Raises:
            MaintenanceInProgressError: Une autre operation est en cours.
        """
        if not self._lock.acquire(blocking=False):
            raise MaintenanceInProgressError(self._operation or operation)

        self._operation = operation
        stop = threading.Event()
        heartbeat: Optional[threading.Thread] = None
        try:
            if self._flag is not None:
                self._flag.raise_flag(operation)
                if self._heartbeat_seconds:
                    heartbeat = threading.Thread(
                        target=self._beat,
                        args=(stop, operation),
                        name=f"maintenance-heartbeat-{operation}",
                        daemon=True,
                    )
                    heartbeat.start()
            logger.info("maintenance_started", operation=operation)
            yield
        finally:
            stop.set()
            if heartbeat is not None:
                heartbeat.join()
            if self._flag is not None:
                self._flag.clear()
            self._operation = None
            self._lock.release()
            logger.info("maintenance_ended", operation=operation)

    def _beat(self, stop: threading.Event, operation: str) -> None:
        while not stop.wait(self._heartbeat_seconds):
            try:
                self._flag.refresh()
            except OSError as e:
                logger.warning("maintenance_flag_refresh_failed", operation=operation, error=str(e))
