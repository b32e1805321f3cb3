"""
Dependencies - Injection de dependances FastAPI.

Responsabilite unique:
----------------------
Fournir le conteneur et le controle d'acces aux endpoints.

Usage:
------
    @router.get("/list")
    def list_backups(
        _: TokenPayload = Depends(require_admin),
        container: Container = Depends(get_container),
    ):
        ...
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pos_backoffice.infrastructure.container import Container
from pos_backoffice.presentation.api.auth.jwt_service import JWTService, TokenPayload
from pos_backoffice.presentation.api.config import APISettings, get_settings

# Security scheme
bearer_scheme = HTTPBearer(auto_error=False)


def get_api_settings(request: Request) -> APISettings:
    """Retourne la configuration de l'application courante."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_container(request: Request) -> Container:
    """Retourne le conteneur construit au demarrage de l'application."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service en cours de demarrage",
        )
    return container


def get_jwt_service(settings: APISettings = Depends(get_api_settings)) -> JWTService:
    """Retourne le JWTService."""
    return JWTService(settings)


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> Optional[TokenPayload]:
    """
    Extrait le payload du token JWT.

    Returns:
        TokenPayload si token valide, None sinon.
    """
    if not credentials:
        return None

    return jwt_service.verify_access_token(credentials.credentials)


def require_admin(
    payload: Optional[TokenPayload] = Depends(get_token_payload),
    settings: APISettings = Depends(get_api_settings),
) -> Optional[TokenPayload]:
    """
    Autorise uniquement les administrateurs.

    Raises:
        HTTPException 401 si non authentifie, 403 si pas admin.
    """
    if not settings.auth_enabled:
        return payload

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalide ou expire",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.role != settings.admin_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acces reserve aux administrateurs",
        )

    return payload
