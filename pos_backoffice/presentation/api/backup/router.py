"""
Backup Router - Endpoints des sauvegardes.

Responsabilite unique:
----------------------
Exposer les operations de backup aux administrateurs.
Delegue toute la logique aux use cases du conteneur.

Endpoints:
----------
- GET /backup/settings: Parametres du backup automatique
- POST /backup/settings: Mise a jour partielle
- GET /backup/list: Liste des fichiers
- POST /backup: Backup manuel (renvoie le fichier)
- GET /backup/download/{filename}: Telechargement
- DELETE /backup/delete/{filename}: Suppression
- GET /backup/schedule: Prochaine execution
- POST /backup/restore/{filename}: Restauration
"""

from typing import BinaryIO, Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from pos_backoffice.application.use_cases.manage_settings import UpdateSettingsRequest
from pos_backoffice.application.use_cases.restore_backup import RestoreBackupRequest
from pos_backoffice.application.use_cases.run_backup import RunBackupRequest
from pos_backoffice.domain.entities.backup_artifact import BackupArtifact, BackupTrigger
from pos_backoffice.domain.entities.settings import BackupSettings
from pos_backoffice.infrastructure.container import Container
from pos_backoffice.presentation.api.backup.schemas import (
    ArtifactListResponse,
    ArtifactResponse,
    BackupSettingsResponse,
    BackupSettingsUpdate,
    DeleteResponse,
    RestoreRequest,
    RestoreResponse,
    ScheduleStatusResponse,
)
from pos_backoffice.presentation.api.dependencies import get_container, require_admin

router = APIRouter(prefix="/backup", tags=["Backup"], dependencies=[Depends(require_admin)])

CHUNK_SIZE = 64 * 1024


def _settings_response(settings: BackupSettings) -> BackupSettingsResponse:
    return BackupSettingsResponse(**settings.to_dict())


def _iter_file(handle: BinaryIO) -> Iterator[bytes]:
    with handle:
        for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
            yield chunk


def _file_response(container: Container, artifact: BackupArtifact) -> StreamingResponse:
    """Renvoie l'artifact en piece jointe binaire."""
    return StreamingResponse(
        _iter_file(container.artifact_store.open(artifact.filename)),
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": f'attachment; filename="{artifact.filename}"',
            "Content-Length": str(artifact.size_bytes),
        },
    )


@router.get(
    "/settings",
    response_model=BackupSettingsResponse,
    summary="Parametres du backup",
)
def get_backup_settings(container: Container = Depends(get_container)):
    """Retourne les parametres (crees avec les defauts au premier acces)."""
    return _settings_response(container.settings_repository.get_backup_settings())


@router.post(
    "/settings",
    response_model=BackupSettingsResponse,
    summary="Modifier les parametres du backup",
    description="Mise a jour partielle: seuls les champs fournis sont modifies.",
)
def save_backup_settings(
    data: BackupSettingsUpdate,
    container: Container = Depends(get_container),
):
    saved = container.update_backup_settings.execute(
        UpdateSettingsRequest(changes=data.model_dump(exclude_none=True))
    )
    return _settings_response(saved)


@router.get(
    "/list",
    response_model=ArtifactListResponse,
    summary="Lister les backups",
)
def list_backups(container: Container = Depends(get_container)):
    artifacts = container.artifact_store.list()
    return ArtifactListResponse(
        backups=[ArtifactResponse(**a.to_dict()) for a in artifacts],
        total=len(artifacts),
    )


@router.post(
    "",
    summary="Backup manuel",
    description="Cree un backup et renvoie le fichier (application/octet-stream).",
    response_class=StreamingResponse,
)
def create_backup(container: Container = Depends(get_container)):
    response = container.run_backup.execute(RunBackupRequest(BackupTrigger.MANUAL))
    return _file_response(container, response.artifact)


@router.get(
    "/download/{filename}",
    summary="Telecharger un backup",
    response_class=StreamingResponse,
)
def download_backup(filename: str, container: Container = Depends(get_container)):
    artifact = container.artifact_store.get(filename)
    return _file_response(container, artifact)


@router.delete(
    "/delete/{filename}",
    response_model=DeleteResponse,
    summary="Supprimer un backup",
)
def delete_backup(filename: str, container: Container = Depends(get_container)):
    container.artifact_store.delete(filename)
    return DeleteResponse(filename=filename)


@router.get(
    "/schedule",
    response_model=ScheduleStatusResponse,
    summary="Etat du planning",
)
def schedule_status(container: Container = Depends(get_container)):
    settings = container.settings_repository.get_backup_settings()
    return ScheduleStatusResponse(
        auto_backup_enabled=settings.auto_backup_enabled,
        schedule=str(settings.schedule),
        timezone=container.config.schedule_timezone,
        next_run=container.scheduler.next_backup(),
        scheduler_running=container.scheduler.is_running,
    )


@router.post(
    "/restore/{filename}",
    response_model=RestoreResponse,
    summary="Restaurer un backup",
    description="Cree un backup de securite puis restaure le fichier avec pg_restore.",
)
def restore_backup(
    filename: str,
    data: RestoreRequest,
    container: Container = Depends(get_container),
):
    response = container.restore_backup.execute(
        RestoreBackupRequest(
            filename=filename,
            confirmation_token=data.confirmation_token,
            clean=data.clean,
        )
    )
    return RestoreResponse(
        restored_filename=response.restored_filename,
        backup_filename=response.backup_filename,
        clean=response.clean,
    )
