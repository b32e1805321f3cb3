"""
Errors - Conversion des exceptions du domaine en reponses HTTP.

Responsabilite unique:
----------------------
Un seul handler traduit toute DomainException en JSON:

    {"error": "<CODE>", "message": "<message lisible>", ...}

La sortie d'erreur des outils (pg_dump, pg_restore) reste dans les
logs serveur et n'est jamais renvoyee au client.
"""

from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pos_backoffice.domain.exceptions import (
    ArtifactNotFoundError,
    BackupExecutionError,
    BackupInProgressError,
    BackupTimeoutError,
    ConfirmationMismatchError,
    DomainException,
    InvalidFilenameError,
    MaintenanceInProgressError,
    ResetExecutionError,
    RestoreExecutionError,
    ValidationError,
)
from pos_backoffice.infrastructure.logging import get_logger

logger = get_logger(__name__)

# Ordre significatif: les sous-classes avant leurs parents
STATUS_BY_EXCEPTION = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidFilenameError, status.HTTP_400_BAD_REQUEST),
    (ArtifactNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConfirmationMismatchError, status.HTTP_403_FORBIDDEN),
    (BackupInProgressError, status.HTTP_409_CONFLICT),
    (MaintenanceInProgressError, status.HTTP_409_CONFLICT),
    (BackupTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (BackupExecutionError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ResetExecutionError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (RestoreExecutionError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: DomainException) -> int:
    """Code HTTP d'une exception du domaine."""
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: DomainException) -> Dict[str, Any]:
    """Corps JSON d'une exception du domaine."""
    body: Dict[str, Any] = {"error": exc.code, "message": exc.message}

    if isinstance(exc, ValidationError):
        body["field"] = exc.field
    if isinstance(exc, (ResetExecutionError, RestoreExecutionError)):
        body["backup_filename"] = exc.backup_filename
    if isinstance(exc, ResetExecutionError):
        body["rolled_back"] = exc.rolled_back

    return body


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    code = status_for(exc)
    log = logger.error if code >= 500 else logger.warning
    log("domain_error", code=exc.code, status_code=code)
    return JSONResponse(status_code=code, content=error_body(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(location) or "body"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "VALIDATION_ERROR",
            "message": f"{field}: {first.get('msg', 'requete invalide')}",
            "field": field,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Enregistre les handlers d'erreurs sur l'application."""
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
