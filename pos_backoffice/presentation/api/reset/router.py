"""
Reset Router - Endpoints du reset de la base.

Endpoints:
----------
- GET /reset/settings: Code de confirmation et mode par defaut
- POST /reset/settings: Mise a jour partielle
- POST /reset: Reset (backup automatique prealable)
- GET /reset/status: Etat du controleur
- GET /reset/logs: Journal des resets
"""

from fastapi import APIRouter, Depends, Query

from pos_backoffice.application.use_cases.manage_settings import UpdateSettingsRequest
from pos_backoffice.application.use_cases.reset_database import ResetDatabaseRequest
from pos_backoffice.infrastructure.container import Container
from pos_backoffice.presentation.api.dependencies import get_container, require_admin
from pos_backoffice.presentation.api.reset.schemas import (
    ResetLogListResponse,
    ResetLogResponse,
    ResetRequest,
    ResetResponse,
    ResetSettingsResponse,
    ResetSettingsUpdate,
    ResetStatusResponse,
)

router = APIRouter(prefix="/reset", tags=["Reset"], dependencies=[Depends(require_admin)])


@router.get(
    "/settings",
    response_model=ResetSettingsResponse,
    summary="Parametres du reset",
)
def get_reset_settings(container: Container = Depends(get_container)):
    return ResetSettingsResponse(**container.settings_repository.get_reset_settings().to_dict())


@router.post(
    "/settings",
    response_model=ResetSettingsResponse,
    summary="Modifier les parametres du reset",
)
def save_reset_settings(
    data: ResetSettingsUpdate,
    container: Container = Depends(get_container),
):
    saved = container.update_reset_settings.execute(
        UpdateSettingsRequest(changes=data.model_dump(exclude_none=True))
    )
    return ResetSettingsResponse(**saved.to_dict())


@router.post(
    "",
    response_model=ResetResponse,
    summary="Reset de la base",
    description=(
        "Verifie le code de confirmation, cree un backup puis vide les "
        "donnees transactionnelles (ou tout le schema)."
    ),
)
def reset_database(data: ResetRequest, container: Container = Depends(get_container)):
    response = container.reset_database.execute(
        ResetDatabaseRequest(
            confirmation_token=data.confirmation_token,
            preserve_master_data=data.preserve_master_data,
        )
    )
    result = response.result
    return ResetResponse(
        backup_filename=result.backup_filename,
        summary=result.summary,
        preserve_master_data=result.preserve_master_data,
        rows_before=result.rows_before,
        rows_after=result.rows_after,
        rows_deleted=result.rows_deleted,
        log_id=response.log_entry.id,
    )


@router.get(
    "/status",
    response_model=ResetStatusResponse,
    summary="Etat du reset",
)
def reset_status(container: Container = Depends(get_container)):
    status = container.reset_database.status()
    return ResetStatusResponse(
        state=status.state.value,
        current_operation=container.reset_database.current_operation,
        last_outcome=status.last_outcome.value if status.last_outcome else None,
        last_backup_filename=status.last_backup_filename,
        last_finished_at=status.last_finished_at,
    )


@router.get(
    "/logs",
    response_model=ResetLogListResponse,
    summary="Journal des resets",
)
def list_reset_logs(
    limit: int = Query(100, ge=1, le=500, description="Nombre max"),
    container: Container = Depends(get_container),
):
    entries = container.reset_log_repository.list(limit=limit)
    return ResetLogListResponse(
        logs=[
            ResetLogResponse(
                id=e.id,
                created_at=e.created_at,
                backup_filename=e.backup_filename,
                preserve_master_data=e.preserve_master_data,
                content=e.content,
            )
            for e in entries
        ],
        total=len(entries),
    )
