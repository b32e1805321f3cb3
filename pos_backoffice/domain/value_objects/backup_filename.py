"""
Value Object pour le nom d'un fichier de backup.

Format: backup-<horodatage ISO 8601 UTC, ':' et '.' remplaces par '-'>.backup

    backup-2024-03-15T08-00-00-123Z.backup
    backup-2024-03-15T08-00-00.backup        (ancien format sans millisecondes)

La validation par liste blanche se fait avant tout acces au systeme de
fichiers: aucun separateur de chemin, aucun '..', aucun caractere
hors du motif.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pos_backoffice.domain.exceptions import InvalidFilenameError


BACKUP_FILENAME_PATTERN = re.compile(
    r"^backup-(\d{4})-(\d{2})-(\d{2})T(\d{2})-(\d{2})-(\d{2})(?:-(\d{3}))?Z?\.backup$"
)

MAX_FILENAME_LENGTH = 64


@dataclass(frozen=True, slots=True)
class BackupFilename:
    """
    Nom de fichier de backup valide par construction.

    Attributes:
        value: Nom du fichier.

    Example:
        >>> name = BackupFilename.for_timestamp(datetime(2024, 3, 15, 8, tzinfo=timezone.utc))
        >>> str(name)
        'backup-2024-03-15T08-00-00-000Z.backup'
    """

    value: str

    def __post_init__(self) -> None:
        """Valide le nom contre la liste blanche."""
        self._check(self.value)

    @staticmethod
    def _check(value: Any) -> datetime:
        if not isinstance(value, str) or len(value) > MAX_FILENAME_LENGTH:
            raise InvalidFilenameError(value)

        match = BACKUP_FILENAME_PATTERN.fullmatch(value)
        if not match:
            raise InvalidFilenameError(value)

        year, month, day, hour, minute, second, millis = match.groups()
        try:
            return datetime(
                int(year), int(month), int(day),
                int(hour), int(minute), int(second),
                int(millis or 0) * 1000,
                tzinfo=timezone.utc,
            )
        except ValueError:
            raise InvalidFilenameError(value) from None

    @classmethod
    def for_timestamp(cls, moment: datetime) -> "BackupFilename":
        """
        Construit le nom a partir d'un horodatage.

        Un datetime naif est considere comme UTC.
        """
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)

        stamp = moment.strftime("%Y-%m-%dT%H-%M-%S")
        millis = moment.microsecond // 1000
        return cls(f"backup-{stamp}-{millis:03d}Z.backup")

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        """Retourne True si la valeur respecte le format."""
        try:
            cls._check(value)
        except InvalidFilenameError:
            return False
        return True

    @property
    def created_at(self) -> datetime:
        """Horodatage (UTC) encode dans le nom."""
        return self._check(self.value)

    def __str__(self) -> str:
        return self.value
