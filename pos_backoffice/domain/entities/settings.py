"""
Settings Entities - Parametres persistants du backup et du reset.

Responsabilite unique:
----------------------
Porter les regles de validation des parametres singletons.

Regles:
-------
- retention_days dans [1, 365]
- schedule: expression cron 5 champs valide
- destination: "local" uniquement
- confirmation_code: au moins 6 caracteres
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from pos_backoffice.domain.exceptions import ValidationError
from pos_backoffice.domain.value_objects.cron_expression import CronExpression


MIN_RETENTION_DAYS = 1
MAX_RETENTION_DAYS = 365
MIN_CONFIRMATION_CODE_LENGTH = 6

DEFAULT_SCHEDULE = "0 0 * * *"  # tous les jours a 00:00
DEFAULT_RETENTION_DAYS = 7
DEFAULT_CONFIRMATION_CODE = "RESET-DB"


class BackupDestination(Enum):
    """Destinations de stockage supportees."""

    LOCAL = "local"


@dataclass(frozen=True)
class BackupSettings:
    """
    Parametres du backup automatique.

    Attributes:
        auto_backup_enabled: Active le backup planifie.
        schedule: Expression cron du backup.
        retention_days: Duree de conservation des fichiers.
        destination: Lieu de stockage.
    """

    auto_backup_enabled: bool = True
    schedule: CronExpression = field(default_factory=lambda: CronExpression(DEFAULT_SCHEDULE))
    retention_days: int = DEFAULT_RETENTION_DAYS
    destination: BackupDestination = BackupDestination.LOCAL

    def __post_init__(self) -> None:
        if not isinstance(self.auto_backup_enabled, bool):
            raise ValidationError("auto_backup_enabled", "doit etre un booleen", self.auto_backup_enabled)
        if not isinstance(self.schedule, CronExpression):
            raise ValidationError("schedule", "doit etre une expression cron", self.schedule)
        if isinstance(self.retention_days, bool) or not isinstance(self.retention_days, int):
            raise ValidationError("retention_days", "doit etre un entier", self.retention_days)
        if not MIN_RETENTION_DAYS <= self.retention_days <= MAX_RETENTION_DAYS:
            raise ValidationError(
                "retention_days",
                f"doit etre entre {MIN_RETENTION_DAYS} et {MAX_RETENTION_DAYS} jours",
                self.retention_days,
            )
        if not isinstance(self.destination, BackupDestination):
            raise ValidationError("destination", "destination inconnue", self.destination)

    def merged(self, changes: dict[str, Any]) -> "BackupSettings":
        """
        Retourne une copie avec les champs fournis, validee.

        Args:
            changes: Champs a modifier (les valeurs None sont ignorees).

        Raises:
            ValidationError: Si un champ est invalide.
        """
        updates: dict[str, Any] = {}

        for key, value in changes.items():
            if value is None:
                continue
            if key == "schedule" and not isinstance(value, CronExpression):
                value = CronExpression(value)
            elif key == "destination" and not isinstance(value, BackupDestination):
                value = _parse_destination(value)
            elif key not in ("auto_backup_enabled", "retention_days"):
                raise ValidationError(key, "champ inconnu", value)
            updates[key] = value

        return replace(self, **updates)

    def to_dict(self) -> dict[str, Any]:
        """Serialisation pour la persistence et l'API."""
        return {
            "auto_backup_enabled": self.auto_backup_enabled,
            "schedule": str(self.schedule),
            "retention_days": self.retention_days,
            "destination": self.destination.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BackupSettings":
        """Reconstruit depuis un dict (champs manquants = defauts)."""
        return cls().merged({
            "auto_backup_enabled": data.get("auto_backup_enabled"),
            "schedule": data.get("schedule"),
            "retention_days": data.get("retention_days"),
            "destination": data.get("destination"),
        })


@dataclass(frozen=True)
class ResetSettings:
    """
    Parametres du reset de la base.

    Attributes:
        confirmation_code: Code a saisir pour autoriser un reset.
        preserve_master_data: Mode propose par defaut dans l'interface.
    """

    confirmation_code: str = DEFAULT_CONFIRMATION_CODE
    preserve_master_data: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.confirmation_code, str) or not self.confirmation_code.strip():
            raise ValidationError("confirmation_code", "ne peut pas etre vide", self.confirmation_code)
        if len(self.confirmation_code) < MIN_CONFIRMATION_CODE_LENGTH:
            raise ValidationError(
                "confirmation_code",
                f"doit contenir au moins {MIN_CONFIRMATION_CODE_LENGTH} caracteres",
            )
        if not isinstance(self.preserve_master_data, bool):
            raise ValidationError("preserve_master_data", "doit etre un booleen", self.preserve_master_data)

    def merged(self, changes: dict[str, Any]) -> "ResetSettings":
        """Retourne une copie avec les champs fournis, validee."""
        updates = {k: v for k, v in changes.items() if v is not None}
        unknown = set(updates) - {"confirmation_code", "preserve_master_data"}
        if unknown:
            name = sorted(unknown)[0]
            raise ValidationError(name, "champ inconnu", updates[name])
        return replace(self, **updates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "confirmation_code": self.confirmation_code,
            "preserve_master_data": self.preserve_master_data,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResetSettings":
        return cls().merged({
            "confirmation_code": data.get("confirmation_code"),
            "preserve_master_data": data.get("preserve_master_data"),
        })


def _parse_destination(value: Any) -> BackupDestination:
    try:
        return BackupDestination(value)
    except ValueError:
        valid = ", ".join(d.value for d in BackupDestination)
        raise ValidationError(
            "destination", f"destination invalide, choix disponibles: {valid}", value
        ) from None
