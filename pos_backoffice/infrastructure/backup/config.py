"""
Backup Config - Configuration technique des sauvegardes.

Responsabilite unique:
----------------------
Porter les parametres d'environnement (chemins, outils, delais).
Les parametres metier (planning, retention) sont en base et
modifiables depuis l'interface admin.

Variables:
----------
- DATABASE_URL: Base a sauvegarder
- BACKUP_DIR: Repertoire de stockage local
- PG_DUMP_PATH / PG_RESTORE_PATH: Binaires PostgreSQL
- DUMP_TIMEOUT_SECONDS: Delai maximum d'un dump
- SCHEDULE_TIMEZONE: Fuseau du planning cron
"""

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackupConfig(BaseSettings):
    """
    Configuration des sauvegardes.

    Chargee depuis les variables d'environnement.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Base de donnees
    database_url: str = "sqlite:///./pos_backoffice.db"

    # Stockage local
    backup_dir: str = "./backup"

    # Outils PostgreSQL
    pg_dump_path: str = "pg_dump"
    pg_restore_path: str = "pg_restore"
    dump_timeout_seconds: float = Field(default=600.0, gt=0)

    # Scheduler
    scheduler_enabled: bool = True
    schedule_tick_seconds: int = Field(default=30, ge=1, le=60)
    sweep_interval_minutes: int = Field(default=60, ge=1)
    schedule_timezone: str = "UTC"

    # Drapeau "reset en cours" (partage avec le worker)
    maintenance_flag_path: str = "./backup/reset-in-progress.flag"
    maintenance_flag_stale_minutes: int = Field(default=5, ge=1)

    @field_validator("schedule_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"fuseau inconnu: {value}") from None
        return value

    @property
    def backup_path(self) -> Path:
        """Retourne le chemin de backup."""
        return Path(self.backup_dir)

    @property
    def timezone(self) -> ZoneInfo:
        """Fuseau du planning."""
        return ZoneInfo(self.schedule_timezone)


@lru_cache
def get_backup_config() -> BackupConfig:
    """Retourne la configuration backup (cached)."""
    return BackupConfig()
