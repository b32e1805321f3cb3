"""
Configuration et fixtures pytest.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Ajouter le repertoire racine au path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pos_backoffice.application.use_cases.maintenance import MaintenanceGuard
from pos_backoffice.application.use_cases.run_backup import RunBackupUseCase
from pos_backoffice.domain.entities.reset_log import ResetLogEntry
from pos_backoffice.domain.entities.settings import BackupSettings, ResetSettings
from pos_backoffice.domain.ports.data_resetter import DataResetError, DataResetter
from pos_backoffice.domain.ports.database_dumper import DatabaseDumper
from pos_backoffice.domain.ports.maintenance_flag import MaintenanceFlag
from pos_backoffice.domain.ports.reset_log_repository import ResetLogRepository
from pos_backoffice.domain.ports.settings_repository import SettingsRepository
from pos_backoffice.domain.value_objects.backup_filename import BackupFilename
from pos_backoffice.infrastructure.backup.local_artifact_store import LocalArtifactStore

# ═══════════════════════════════════════════════════════════════════════════════
# FAKES - PORTS
# ═══════════════════════════════════════════════════════════════════════════════


class FakeDumper(DatabaseDumper):
    """Dumper en memoire: ecrit un contenu fixe ou leve l'erreur configuree."""

    def __init__(self, payload: bytes = b"PGDMP-fake-dump"):
        self.payload = payload
        self.dump_error: Optional[Exception] = None
        self.restore_error: Optional[Exception] = None
        self.dumps: List[str] = []
        self.restores: List[tuple] = []
        self.on_dump = None

    def dump(self, destination: str) -> None:
        self.dumps.append(destination)
        if self.on_dump is not None:
            self.on_dump(destination)
        if self.dump_error is not None:
            # Simule un outil qui a commence a ecrire avant d'echouer
            Path(destination).write_bytes(b"partial")
            raise self.dump_error
        Path(destination).write_bytes(self.payload)

    def restore(self, source: str, clean: bool = True) -> None:
        self.restores.append((source, clean))
        if self.restore_error is not None:
            raise self.restore_error


class InMemorySettingsRepository(SettingsRepository):
    """Repository de parametres en memoire."""

    def __init__(self):
        self.backup = BackupSettings()
        self.reset = ResetSettings()
        self.saves = 0

    def get_backup_settings(self) -> BackupSettings:
        return self.backup

    def save_backup_settings(self, settings: BackupSettings) -> BackupSettings:
        self.backup = settings
        self.saves += 1
        return settings

    def get_reset_settings(self) -> ResetSettings:
        return self.reset

    def save_reset_settings(self, settings: ResetSettings) -> ResetSettings:
        self.reset = settings
        self.saves += 1
        return settings


class InMemoryResetLogRepository(ResetLogRepository):
    """Journal des resets en memoire."""

    def __init__(self):
        self.entries: List[ResetLogEntry] = []

    def append(self, entry: ResetLogEntry) -> ResetLogEntry:
        stored = ResetLogEntry(
            content=entry.content,
            backup_filename=entry.backup_filename,
            preserve_master_data=entry.preserve_master_data,
            created_at=entry.created_at,
            id=len(self.entries) + 1,
        )
        self.entries.append(stored)
        return stored

    def list(self, limit: int = 100) -> List[ResetLogEntry]:
        return sorted(self.entries, key=lambda e: (e.created_at, e.id), reverse=True)[:limit]


class FakeResetter(DataResetter):
    """Tables simulees par des compteurs."""

    MASTER = ("users", "categories", "products")

    def __init__(self):
        self.tables: Dict[str, int] = {
            "users": 2,
            "categories": 3,
            "products": 10,
            "customers": 4,
            "sales": 25,
            "sale_items": 60,
        }
        self.reset_error: Optional[DataResetError] = None
        self.calls: List[bool] = []

    def count_rows(self) -> Dict[str, int]:
        return dict(self.tables)

    def reset(self, preserve_master_data: bool) -> None:
        self.calls.append(preserve_master_data)
        if self.reset_error is not None:
            raise self.reset_error
        for table in self.tables:
            if not preserve_master_data or table not in self.MASTER:
                self.tables[table] = 0


class FakeMaintenanceFlag(MaintenanceFlag):
    """Drapeau de maintenance en memoire."""

    def __init__(self):
        self.active = False
        self.history: List[str] = []

    def raise_flag(self, operation: str) -> None:
        self.active = True
        self.history.append(f"raise:{operation}")

    def clear(self) -> None:
        self.active = False
        self.history.append("clear")

    def refresh(self) -> None:
        if self.active:
            self.history.append("refresh")

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.active


class SteppingClock:
    """Horloge qui avance d'un pas a chaque appel."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES - ADAPTERS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    """Repertoire de backup temporaire."""
    return tmp_path / "backup"


@pytest.fixture
def artifact_store(backup_dir: Path) -> LocalArtifactStore:
    """Stockage local dans un repertoire temporaire."""
    return LocalArtifactStore(backup_dir)


@pytest.fixture
def dumper() -> FakeDumper:
    """Outil de dump simule."""
    return FakeDumper()


@pytest.fixture
def settings_repo() -> InMemorySettingsRepository:
    """Parametres en memoire (valeurs par defaut)."""
    return InMemorySettingsRepository()


@pytest.fixture
def reset_log_repo() -> InMemoryResetLogRepository:
    """Journal des resets en memoire."""
    return InMemoryResetLogRepository()


@pytest.fixture
def resetter() -> FakeResetter:
    """Phase destructive simulee."""
    return FakeResetter()


@pytest.fixture
def maintenance_flag() -> FakeMaintenanceFlag:
    """Drapeau de maintenance en memoire."""
    return FakeMaintenanceFlag()


@pytest.fixture
def clock() -> SteppingClock:
    """Horloge deterministe (15 mars 2024, 08:00 UTC)."""
    return SteppingClock(datetime(2024, 3, 15, 8, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def executor(artifact_store, dumper, clock) -> RunBackupUseCase:
    """Executeur de backup branche sur les fakes."""
    return RunBackupUseCase(artifact_store, dumper, clock=clock)


@pytest.fixture
def guard(maintenance_flag) -> MaintenanceGuard:
    """Garde de maintenance."""
    return MaintenanceGuard(maintenance_flag)


@pytest.fixture
def make_artifact(backup_dir: Path):
    """Factory: cree un fichier de backup date."""
    backup_dir.mkdir(parents=True, exist_ok=True)

    def _make(created_at: datetime, content: bytes = b"PGDMP") -> str:
        name = BackupFilename.for_timestamp(created_at).value
        (backup_dir / name).write_bytes(content)
        return name

    return _make
