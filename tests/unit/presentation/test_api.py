"""
Tests unitaires pour l'API REST.

Teste l'authentification admin, les endpoints backup/reset et le
format des erreurs.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from pos_backoffice.domain.exceptions import BackupExecutionError, BackupTimeoutError
from pos_backoffice.domain.ports.data_resetter import DataResetError
from pos_backoffice.infrastructure.backup.config import BackupConfig
from pos_backoffice.infrastructure.container import Container
from pos_backoffice.presentation.api.auth.jwt_service import JWTService
from pos_backoffice.presentation.api.config import APISettings
from pos_backoffice.presentation.api.main import create_app

SECRET = "test-secret-key-for-the-admin-api-0123456789"
PREFIX = "/api/v1"


@pytest.fixture
def api_settings() -> APISettings:
    return APISettings(_env_file=None, jwt_secret_key=SECRET)


@pytest.fixture
def container(tmp_path, dumper, resetter):
    """Conteneur SQLite avec dump et reset simules."""
    config = BackupConfig(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'pos.db'}",
        backup_dir=str(tmp_path / "backup"),
        maintenance_flag_path=str(tmp_path / "reset.flag"),
    )
    container = Container.create(config, dumper=dumper, resetter=resetter)
    yield container
    container.shutdown()


@pytest.fixture
def client(container, api_settings) -> TestClient:
    """Client authentifie en administrateur."""
    token = JWTService(api_settings).create_access_token("admin", role="admin")
    client = TestClient(create_app(container, api_settings))
    client.headers["Authorization"] = f"Bearer {token}"
    return client


def _create_backup(client: TestClient) -> str:
    response = client.post(f"{PREFIX}/backup")
    assert response.status_code == 200
    return response.headers["content-disposition"].split('filename="')[1].rstrip('"')


# ═══════════════════════════════════════════════════════════════════════════════
# TESTS - JWT et acces
# ═══════════════════════════════════════════════════════════════════════════════


class TestJWTService:
    """Tests pour le service JWT."""

    def test_round_trip(self, api_settings):
        """Un token emis est verifie avec son role."""
        service = JWTService(api_settings)

        payload = service.verify_access_token(service.create_access_token("alice", "admin"))

        assert payload.subject == "alice"
        assert payload.role == "admin"

    def test_invalid_token(self, api_settings):
        assert JWTService(api_settings).verify_access_token("invalid-token") is None

    def test_expired_token(self, api_settings):
        service = JWTService(api_settings)
        token = service.create_access_token("alice", "admin", expires_in=timedelta(seconds=-1))

        assert service.verify_access_token(token) is None

    def test_wrong_secret(self, api_settings):
        token = JWTService(api_settings).create_access_token("alice", "admin")
        other = JWTService(APISettings(_env_file=None, jwt_secret_key="another-secret-" + SECRET))

        assert other.verify_access_token(token) is None


class TestAdminAccess:
    """Tests du controle d'acces."""

    def test_missing_token(self, container, api_settings):
        """Sans token: 401."""
        client = TestClient(create_app(container, api_settings))
        assert client.get(f"{PREFIX}/backup/list").status_code == 401

    def test_invalid_token(self, container, api_settings):
        """Token invalide: 401."""
        client = TestClient(create_app(container, api_settings))
        response = client.get(
            f"{PREFIX}/backup/list", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    def test_non_admin(self, container, api_settings):
        """Un caissier n'accede pas aux operations de maintenance."""
        token = JWTService(api_settings).create_access_token("bob", role="cashier")
        client = TestClient(create_app(container, api_settings))

        response = client.post(
            f"{PREFIX}/reset",
            json={"confirmation_token": "RESET-DB"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 403

    def test_auth_disabled(self, container):
        """AUTH_ENABLED=false ouvre les routes (developpement)."""
        settings = APISettings(_env_file=None, jwt_secret_key=SECRET, auth_enabled=False)
        client = TestClient(create_app(container, settings))

        assert client.get(f"{PREFIX}/backup/list").status_code == 200

    def test_health_is_public(self, container, api_settings):
        """GET /health ne demande pas de token."""
        client = TestClient(create_app(container, api_settings))
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["scheduler_running"] is False

    def test_request_id_header(self, client):
        """Chaque reponse porte un X-Request-ID."""
        assert client.get("/health").headers.get("x-request-id")


# ═══════════════════════════════════════════════════════════════════════════════
# TESTS - /backup
# ═══════════════════════════════════════════════════════════════════════════════


class TestBackupSettingsEndpoints:
    """Tests de /backup/settings."""

    def test_defaults(self, client):
        response = client.get(f"{PREFIX}/backup/settings")

        assert response.status_code == 200
        assert response.json() == {
            "auto_backup_enabled": True,
            "schedule": "0 0 * * *",
            "retention_days": 7,
            "destination": "local",
        }

    def test_partial_update(self, client):
        response = client.post(f"{PREFIX}/backup/settings", json={"retention_days": 14})

        assert response.status_code == 200
        assert response.json()["retention_days"] == 14
        assert response.json()["schedule"] == "0 0 * * *"
        assert client.get(f"{PREFIX}/backup/settings").json()["retention_days"] == 14

    def test_invalid_cron(self, client):
        """Un cron invalide: 400, rien n'est persiste."""
        response = client.post(
            f"{PREFIX}/backup/settings", json={"schedule": "@daily", "retention_days": 30}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_CRON"
        assert response.json()["field"] == "schedule"
        assert client.get(f"{PREFIX}/backup/settings").json()["retention_days"] == 7

    def test_non_ascii_digit_cron(self, client):
        """Un chiffre exposant n'est pas un nombre cron: 400, pas 500."""
        response = client.post(f"{PREFIX}/backup/settings", json={"schedule": "0 ² * * *"})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_CRON"

    @pytest.mark.parametrize("payload", [
        {"retention_days": 0},
        {"retention_days": 366},
        {"retention_days": "abc"},
        {"destination": "s3"},
        {"compression": "gzip"},
    ])
    def test_invalid_values(self, client, payload):
        response = client.post(f"{PREFIX}/backup/settings", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


class TestBackupFileEndpoints:
    """Tests de creation, liste, telechargement et suppression."""

    def test_manual_backup_returns_file(self, client, dumper):
        response = client.post(f"{PREFIX}/backup")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/octet-stream"
        assert "attachment" in response.headers["content-disposition"]
        assert response.content == dumper.payload

    def test_list(self, client):
        name = _create_backup(client)

        body = client.get(f"{PREFIX}/backup/list").json()

        assert body["total"] == 1
        assert body["backups"][0]["filename"] == name
        assert "storage_path" not in body["backups"][0]

    def test_download(self, client, dumper):
        name = _create_backup(client)

        response = client.get(f"{PREFIX}/backup/download/{name}")

        assert response.status_code == 200
        assert response.content == dumper.payload
        assert response.headers["content-length"] == str(len(dumper.payload))

    def test_download_invalid_name(self, client):
        response = client.get(f"{PREFIX}/backup/download/notes.txt")

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_FILENAME"

    def test_download_missing(self, client):
        response = client.get(f"{PREFIX}/backup/download/backup-2024-03-15T08-00-00-000Z.backup")

        assert response.status_code == 404
        assert response.json()["error"] == "BACKUP_NOT_FOUND"

    def test_delete_twice(self, client):
        name = _create_backup(client)

        first = client.delete(f"{PREFIX}/backup/delete/{name}")
        second = client.delete(f"{PREFIX}/backup/delete/{name}")

        assert first.status_code == 200
        assert first.json() == {"success": True, "filename": name}
        assert second.status_code == 404

    def test_dump_failure(self, client, dumper):
        """La sortie de pg_dump n'est jamais renvoyee au client."""
        dumper.dump_error = BackupExecutionError("pg_dump a termine avec le code 1", "FATAL: secret")

        response = client.post(f"{PREFIX}/backup")

        assert response.status_code == 500
        assert response.json()["error"] == "BACKUP_FAILED"
        assert "FATAL" not in response.text
        assert client.get(f"{PREFIX}/backup/list").json()["total"] == 0

    def test_dump_timeout(self, client, dumper):
        dumper.dump_error = BackupTimeoutError(600)

        response = client.post(f"{PREFIX}/backup")

        assert response.status_code == 504
        assert response.json()["error"] == "BACKUP_TIMEOUT"

    def test_schedule_status(self, client):
        body = client.get(f"{PREFIX}/backup/schedule").json()

        assert body["auto_backup_enabled"] is True
        assert body["schedule"] == "0 0 * * *"
        assert body["timezone"] == "UTC"
        assert body["next_run"] is not None
        assert body["scheduler_running"] is False

    def test_schedule_disabled(self, client):
        client.post(f"{PREFIX}/backup/settings", json={"auto_backup_enabled": False})

        assert client.get(f"{PREFIX}/backup/schedule").json()["next_run"] is None


class TestRestoreEndpoint:
    """Tests de /backup/restore."""

    def test_restore(self, client, dumper):
        name = _create_backup(client)

        response = client.post(
            f"{PREFIX}/backup/restore/{name}", json={"confirmation_token": "RESET-DB"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["restored_filename"] == name
        assert body["backup_filename"] != name
        assert body["clean"] is True
        assert len(dumper.restores) == 1

    def test_wrong_code(self, client, dumper):
        name = _create_backup(client)

        response = client.post(
            f"{PREFIX}/backup/restore/{name}", json={"confirmation_token": "WRONG-CODE"}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "CONFIRMATION_MISMATCH"
        assert dumper.restores == []

    def test_empty_token(self, client):
        name = _create_backup(client)

        response = client.post(f"{PREFIX}/backup/restore/{name}", json={"confirmation_token": ""})

        assert response.status_code == 400

    def test_restore_failure(self, client, dumper):
        name = _create_backup(client)
        dumper.restore_error = BackupExecutionError("pg_restore a termine avec le code 1")

        response = client.post(
            f"{PREFIX}/backup/restore/{name}", json={"confirmation_token": "RESET-DB"}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "RESTORE_FAILED"
        assert response.json()["backup_filename"]


# ═══════════════════════════════════════════════════════════════════════════════
# TESTS - /reset
# ═══════════════════════════════════════════════════════════════════════════════


class TestResetEndpoints:
    """Tests de /reset."""

    def test_settings(self, client):
        assert client.get(f"{PREFIX}/reset/settings").json() == {
            "confirmation_code": "RESET-DB",
            "preserve_master_data": True,
        }

    def test_update_code(self, client):
        response = client.post(
            f"{PREFIX}/reset/settings", json={"confirmation_code": "EFFACER-TOUT"}
        )

        assert response.status_code == 200
        assert response.json()["confirmation_code"] == "EFFACER-TOUT"

    def test_short_code_rejected(self, client):
        response = client.post(f"{PREFIX}/reset/settings", json={"confirmation_code": "abc"})

        assert response.status_code == 400
        assert response.json()["field"] == "confirmation_code"

    def test_wrong_code(self, client, resetter, dumper):
        response = client.post(f"{PREFIX}/reset", json={"confirmation_token": "RESET-D8"})

        assert response.status_code == 403
        assert resetter.calls == []
        assert dumper.dumps == []

    def test_reset(self, client, resetter):
        response = client.post(
            f"{PREFIX}/reset",
            json={"confirmation_token": "RESET-DB", "preserve_master_data": True},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["backup_filename"].startswith("backup-")
        assert "Backup pre-reset" in body["summary"]
        assert body["rows_after"]["products"] == 10
        assert resetter.calls == [True]

        backups = [b["filename"] for b in client.get(f"{PREFIX}/backup/list").json()["backups"]]
        assert body["backup_filename"] in backups

    def test_logs_and_status(self, client):
        reset = client.post(f"{PREFIX}/reset", json={"confirmation_token": "RESET-DB"}).json()

        logs = client.get(f"{PREFIX}/reset/logs").json()
        status = client.get(f"{PREFIX}/reset/status").json()

        assert logs["total"] == 1
        assert logs["logs"][0]["backup_filename"] == reset["backup_filename"]
        assert logs["logs"][0]["id"] == reset["log_id"]
        assert status["state"] == "idle"
        assert status["last_outcome"] == "completed"
        assert status["current_operation"] is None

    def test_logs_limit_bounds(self, client):
        assert client.get(f"{PREFIX}/reset/logs?limit=0").status_code == 400

    def test_backup_failure_refuses_reset(self, client, dumper, resetter):
        dumper.dump_error = BackupExecutionError("connexion refusee")

        response = client.post(f"{PREFIX}/reset", json={"confirmation_token": "RESET-DB"})

        assert response.status_code == 500
        assert response.json()["error"] == "BACKUP_FAILED"
        assert resetter.calls == []

    def test_destructive_failure(self, client, resetter):
        resetter.reset_error = DataResetError("erreur de la base de donnees (OperationalError)", True)

        response = client.post(f"{PREFIX}/reset", json={"confirmation_token": "RESET-DB"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "RESET_FAILED"
        assert body["rolled_back"] is True
        assert body["backup_filename"].startswith("backup-")

    def test_concurrent_maintenance(self, client, container):
        with container.reset_database._guard.hold("restore"):
            response = client.post(f"{PREFIX}/reset", json={"confirmation_token": "RESET-DB"})

        assert response.status_code == 409
        assert response.json()["error"] == "MAINTENANCE_IN_PROGRESS"
