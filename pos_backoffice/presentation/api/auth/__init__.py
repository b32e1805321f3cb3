"""Authentification JWT des routes d'administration."""

from pos_backoffice.presentation.api.auth.jwt_service import JWTService, TokenPayload

__all__ = ["JWTService", "TokenPayload"]
