"""
FileMaintenanceFlag - Drapeau "reset en cours" sur disque.

Un fichier partage entre le processus API et le worker: son existence
signale un reset ou une restauration. Un drapeau plus vieux que
`stale_after` est considere comme abandonne (crash) et supprime.
"""

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Union

from pos_backoffice.domain.ports.maintenance_flag import MaintenanceFlag
from pos_backoffice.infrastructure.logging import get_logger

logger = get_logger(__name__)


class FileMaintenanceFlag(MaintenanceFlag):
    """Implementation MaintenanceFlag par fichier."""

    def __init__(self, path: Union[str, Path], stale_after: timedelta = timedelta(minutes=5)):
        """
        Args:
            path: Chemin du fichier drapeau.
            stale_after: Age au-dela duquel le drapeau est ignore.
        """
        self._path = Path(path)
        self._stale_after = stale_after

    @property
    def path(self) -> Path:
        return self._path

    def raise_flag(self, operation: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps({
                "operation": operation,
                "started_at": datetime.now(timezone.utc).isoformat(),
            }),
            encoding="utf-8",
        )

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)

    def refresh(self) -> None:
        try:
            os.utime(self._path)
        except FileNotFoundError:
            pass

    def is_active(self, now: Optional[datetime] = None) -> bool:
        try:
            mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            return False

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        age = now - datetime.fromtimestamp(mtime, tz=timezone.utc)

        if age > self._stale_after:
            logger.warning("stale_maintenance_flag_removed", age_seconds=int(age.total_seconds()))
            self.clear()
            return False
        return True
