"""
Backup Infrastructure - Adapters des sauvegardes.

Features:
---------
- pg_dump / pg_restore en sous-processus
- Stockage local des fichiers de backup
- Timer APScheduler (planning cron + retention)
- Drapeau de maintenance partage entre processus
"""

from pos_backoffice.infrastructure.backup.config import BackupConfig, get_backup_config
from pos_backoffice.infrastructure.backup.local_artifact_store import LocalArtifactStore
from pos_backoffice.infrastructure.backup.maintenance_flag import FileMaintenanceFlag
from pos_backoffice.infrastructure.backup.pg_tools import PgDumpTool
from pos_backoffice.infrastructure.backup.scheduler import BackupScheduler

__all__ = [
    "BackupConfig",
    "get_backup_config",
    "LocalArtifactStore",
    "FileMaintenanceFlag",
    "PgDumpTool",
    "BackupScheduler",
]
