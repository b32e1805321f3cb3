"""
Tests unitaires pour le Container d'injection de dependances.
"""

from datetime import datetime, timezone

import pytest

from pos_backoffice.application.use_cases.run_backup import RunBackupRequest
from pos_backoffice.infrastructure.backup.config import BackupConfig
from pos_backoffice.infrastructure.backup.pg_tools import PgDumpTool
from pos_backoffice.infrastructure.container import Container
from pos_backoffice.infrastructure.persistence.data_resetter import SqlAlchemyDataResetter


@pytest.fixture
def config(tmp_path):
    """Configuration pointant vers des fichiers temporaires."""
    return BackupConfig(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'pos.db'}",
        backup_dir=str(tmp_path / "backup"),
        maintenance_flag_path=str(tmp_path / "backup" / "reset.flag"),
        schedule_timezone="Europe/Paris",
    )


class TestContainer:
    """Tests pour Container."""

    def test_create_defaults(self, config):
        """Sans surcharge, les adapters de production sont utilises."""
        container = Container.create(config)

        try:
            assert isinstance(container.dumper, PgDumpTool)
            assert isinstance(container.reset_database._resetter, SqlAlchemyDataResetter)
            assert container.backup_schedule.schedule_timezone.key == "Europe/Paris"
            assert container.scheduler.is_running is False
            assert container.db.health_check()["status"] == "healthy"
        finally:
            container.shutdown()

    def test_shared_executor(self, config, dumper):
        """Toutes les operations partagent le meme executeur."""
        container = Container.create(config, dumper=dumper)

        try:
            assert container.backup_schedule._executor is container.run_backup
            assert container.reset_database._executor is container.run_backup
            assert container.restore_backup._executor is container.run_backup
        finally:
            container.shutdown()

    def test_cleans_stale_partials(self, config, tmp_path):
        """Les partiels d'un arret brutal sont supprimes a la creation."""
        backup_dir = tmp_path / "backup"
        backup_dir.mkdir()
        stale = backup_dir / ".backup-2024-03-15T08-00-00-000Z.backup.partial"
        stale.write_bytes(b"...")

        container = Container.create(config)
        container.shutdown()

        assert not stale.exists()

    def test_backup_with_fake_dumper(self, config, dumper):
        """Un backup de bout en bout via le conteneur."""
        moment = datetime(2024, 3, 15, 8, 0, tzinfo=timezone.utc)
        container = Container.create(config, dumper=dumper, clock=lambda: moment)

        try:
            response = container.run_backup.execute(RunBackupRequest())
            assert container.artifact_store.get(response.artifact.filename).size_bytes > 0
        finally:
            container.shutdown()

    def test_flag_heartbeat_within_stale_window(self, config):
        """Le drapeau est rafraichi avant de pouvoir etre juge perime."""
        container = Container.create(config)

        try:
            heartbeat = container.reset_database._guard._heartbeat_seconds
            assert 0 < heartbeat < config.maintenance_flag_stale_minutes * 60
        finally:
            container.shutdown()
