"""
Tests unitaires pour la ligne de commande (run.py).
"""

import pytest

import run
from pos_backoffice.infrastructure.backup.config import BackupConfig
from pos_backoffice.presentation.api.auth.jwt_service import JWTService
from pos_backoffice.presentation.api.config import get_settings


@pytest.fixture
def sqlite_config(tmp_path, monkeypatch):
    """Configuration SQLite temporaire injectee dans la CLI."""
    config = BackupConfig(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'pos.db'}",
        backup_dir=str(tmp_path / "backup"),
        maintenance_flag_path=str(tmp_path / "reset.flag"),
    )
    monkeypatch.setattr(run, "get_backup_config", lambda: config)
    return config


class TestCli:
    """Tests des sous-commandes."""

    def test_token(self, capsys):
        """Le token emis est accepte par l'API."""
        assert run.main(["token", "--subject", "alice"]) == 0

        token = capsys.readouterr().out.strip().splitlines()[-1]
        payload = JWTService(get_settings()).verify_access_token(token)

        assert payload.subject == "alice"
        assert payload.role == "admin"

    def test_backup_requires_postgresql(self, sqlite_config, capsys):
        """Sans PostgreSQL, la commande echoue avec un message clair."""
        assert run.main(["backup"]) == 1
        assert "PostgreSQL" in capsys.readouterr().err

    def test_sweep(self, sqlite_config, capsys):
        assert run.main(["sweep"]) == 0
        assert "retention 7 jours" in capsys.readouterr().out

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            run.main(["explode"])
