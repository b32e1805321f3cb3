"""
Container d'injection de dependances.

Ce module assemble une seule fois tous les composants du cycle de vie
des sauvegardes. L'API recoit le conteneur via app.state, le worker
et la CLI le construisent eux-memes.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from pos_backoffice.application.use_cases.backup_schedule import BackupScheduleUseCase
from pos_backoffice.application.use_cases.maintenance import MaintenanceGuard
from pos_backoffice.application.use_cases.manage_settings import (
    UpdateBackupSettingsUseCase,
    UpdateResetSettingsUseCase,
)
from pos_backoffice.application.use_cases.reset_database import ResetDatabaseUseCase
from pos_backoffice.application.use_cases.restore_backup import RestoreBackupUseCase
from pos_backoffice.application.use_cases.run_backup import RunBackupUseCase
from pos_backoffice.domain.ports.data_resetter import DataResetter
from pos_backoffice.domain.ports.database_dumper import DatabaseDumper
from pos_backoffice.infrastructure.backup.config import BackupConfig
from pos_backoffice.infrastructure.backup.local_artifact_store import LocalArtifactStore
from pos_backoffice.infrastructure.backup.maintenance_flag import FileMaintenanceFlag
from pos_backoffice.infrastructure.backup.pg_tools import PgDumpTool
from pos_backoffice.infrastructure.backup.scheduler import BackupScheduler
from pos_backoffice.infrastructure.persistence.data_resetter import SqlAlchemyDataResetter
from pos_backoffice.infrastructure.persistence.database import DatabaseManager
from pos_backoffice.infrastructure.persistence.reset_log_repository import (
    SqlAlchemyResetLogRepository,
)
from pos_backoffice.infrastructure.persistence.settings_repository import (
    SqlAlchemySettingsRepository,
)


@dataclass
class Container:
    """
    Conteneur d'injection de dependances.

    Example:
        >>> container = Container.create(get_backup_config())
        >>> container.scheduler.start()
        >>> container.run_backup.execute(RunBackupRequest())
    """

    config: BackupConfig
    db: DatabaseManager

    # Adapters
    artifact_store: LocalArtifactStore
    dumper: DatabaseDumper
    settings_repository: SqlAlchemySettingsRepository
    reset_log_repository: SqlAlchemyResetLogRepository
    maintenance_flag: FileMaintenanceFlag

    # Use Cases
    run_backup: RunBackupUseCase
    backup_schedule: BackupScheduleUseCase
    update_backup_settings: UpdateBackupSettingsUseCase
    update_reset_settings: UpdateResetSettingsUseCase
    reset_database: ResetDatabaseUseCase
    restore_backup: RestoreBackupUseCase

    # Timer
    scheduler: BackupScheduler

    @classmethod
    def create(
        cls,
        config: BackupConfig,
        dumper: Optional[DatabaseDumper] = None,
        resetter: Optional[DataResetter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "Container":
        """
        Factory pour creer un conteneur avec toutes les dependances.

        Args:
            config: Configuration technique.
            dumper: Outil de dump (defaut: pg_dump/pg_restore).
            resetter: Phase destructive (defaut: SQLAlchemy).
            clock: Horloge des noms de backup (tests).

        Returns:
            Container configure, tables creees, fichiers partiels nettoyes.
        """
        db = DatabaseManager(config.database_url)
        db.create_tables()

        artifact_store = LocalArtifactStore(config.backup_path)
        artifact_store.cleanup_partials()

        if dumper is None:
            dumper = PgDumpTool(
                config.database_url,
                pg_dump_path=config.pg_dump_path,
                pg_restore_path=config.pg_restore_path,
                timeout_seconds=config.dump_timeout_seconds,
            )

        settings_repository = SqlAlchemySettingsRepository(db)
        reset_log_repository = SqlAlchemyResetLogRepository(db)
        maintenance_flag = FileMaintenanceFlag(
            config.maintenance_flag_path,
            stale_after=timedelta(minutes=config.maintenance_flag_stale_minutes),
        )
        # Rafraichi deux fois par fenetre de peremption
        guard = MaintenanceGuard(
            maintenance_flag,
            heartbeat_seconds=config.maintenance_flag_stale_minutes * 60 / 2,
        )

        run_backup = RunBackupUseCase(artifact_store, dumper, clock=clock)
        backup_schedule = BackupScheduleUseCase(
            settings_repository,
            run_backup,
            artifact_store,
            maintenance_flag=maintenance_flag,
            schedule_timezone=config.timezone,
        )

        return cls(
            config=config,
            db=db,
            artifact_store=artifact_store,
            dumper=dumper,
            settings_repository=settings_repository,
            reset_log_repository=reset_log_repository,
            maintenance_flag=maintenance_flag,
            run_backup=run_backup,
            backup_schedule=backup_schedule,
            update_backup_settings=UpdateBackupSettingsUseCase(settings_repository),
            update_reset_settings=UpdateResetSettingsUseCase(settings_repository),
            reset_database=ResetDatabaseUseCase(
                settings_repository,
                run_backup,
                resetter or SqlAlchemyDataResetter(db),
                reset_log_repository,
                guard,
            ),
            restore_backup=RestoreBackupUseCase(
                artifact_store,
                run_backup,
                dumper,
                settings_repository,
                guard,
            ),
            scheduler=BackupScheduler(
                backup_schedule,
                tick_seconds=config.schedule_tick_seconds,
                sweep_interval_minutes=config.sweep_interval_minutes,
            ),
        )

    def shutdown(self) -> None:
        """Arrete le timer et libere les connexions."""
        self.scheduler.stop()
        self.db.dispose()
