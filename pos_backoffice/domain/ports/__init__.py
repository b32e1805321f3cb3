"""
Ports du domaine.

Interfaces implementees par la couche infrastructure.
"""

from pos_backoffice.domain.ports.artifact_store import ArtifactStore
from pos_backoffice.domain.ports.data_resetter import DataResetError, DataResetter
from pos_backoffice.domain.ports.database_dumper import DatabaseDumper
from pos_backoffice.domain.ports.maintenance_flag import MaintenanceFlag
from pos_backoffice.domain.ports.reset_log_repository import ResetLogRepository
from pos_backoffice.domain.ports.settings_repository import SettingsRepository

__all__ = [
    "ArtifactStore",
    "DataResetError",
    "DataResetter",
    "DatabaseDumper",
    "MaintenanceFlag",
    "ResetLogRepository",
    "SettingsRepository",
]
