"""
JWTService - Emission et verification des tokens d'acces.

Responsabilite unique:
----------------------
Signer et valider les access tokens JWT qui protegent les routes
d'administration.

Usage:
------
    service = JWTService(settings)
    token = service.create_access_token("admin", role="admin")
    payload = service.verify_access_token(token)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import PyJWTError

from pos_backoffice.presentation.api.config import APISettings


@dataclass
class TokenPayload:
    """
    Payload decode d'un access token.

    Attributes:
        subject: Identifiant de l'utilisateur (claim "sub").
        role: Role de l'utilisateur.
        exp: Date d'expiration.
    """

    subject: str
    role: str
    exp: datetime


class JWTService:
    """Service de gestion JWT."""

    def __init__(self, settings: APISettings):
        """
        Initialise le service.

        Args:
            settings: Configuration API.
        """
        self._secret = settings.jwt_secret_key
        self._algorithm = settings.jwt_algorithm
        self._expire_minutes = settings.jwt_access_expire_minutes

    def create_access_token(
        self,
        subject: str,
        role: str,
        expires_in: Optional[timedelta] = None,
    ) -> str:
        """
        Cree un access token.

        Args:
            subject: Identifiant de l'utilisateur.
            role: Role (admin pour les routes de maintenance).
            expires_in: Duree de vie (defaut: configuration).
        """
        now = datetime.now(timezone.utc)
        return jwt.encode(
            {
                "sub": subject,
                "role": role,
                "type": "access",
                "iat": now,
                "exp": now + (expires_in or timedelta(minutes=self._expire_minutes)),
            },
            self._secret,
            algorithm=self._algorithm,
        )

    def verify_access_token(self, token: str) -> Optional[TokenPayload]:
        """
        Verifie un access token.

        Returns:
            TokenPayload si valide, None sinon (signature, expiration, type).
        """
        try:
            data = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except PyJWTError:
            return None

        if data.get("type") != "access" or "sub" not in data or "role" not in data:
            return None

        return TokenPayload(
            subject=str(data["sub"]),
            role=str(data["role"]),
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
        )
