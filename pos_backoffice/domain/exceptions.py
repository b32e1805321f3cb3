"""
Exceptions metier du domaine.

Ces exceptions representent les echecs du cycle de vie des sauvegardes
(backup, restauration, reset) et sont independantes de l'infrastructure.
La couche API les convertit en reponses HTTP.
"""

from typing import Any


class DomainException(Exception):
    """Exception de base pour toutes les erreurs du domaine."""

    def __init__(self, message: str, code: str | None = None) -> None:
        """
        Initialise une exception du domaine.

        Args:
            message: Message d'erreur descriptif.
            code: Code d'erreur optionnel pour identification programmatique.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(DomainException):
    """Leve quand une entree utilisateur est invalide (aucune mutation)."""

    def __init__(self, field: str, message: str, value: Any = None) -> None:
        super().__init__(f"{field}: {message}", code="VALIDATION_ERROR")
        self.field = field
        self.detail = message
        self.invalid_value = value


class InvalidCronExpressionError(ValidationError):
    """Leve quand une expression cron ne peut pas etre parsee."""

    def __init__(self, value: Any, reason: str) -> None:
        super().__init__("schedule", f"Expression cron invalide '{value}': {reason}", value)
        self.code = "INVALID_CRON"
        self.reason = reason


class BackupExecutionError(DomainException):
    """
    Leve quand l'outil de dump echoue.

    La sortie d'erreur de l'outil est conservee dans `diagnostics`
    pour les logs serveur, jamais renvoyee telle quelle au client.
    """

    def __init__(self, reason: str, diagnostics: str | None = None) -> None:
        super().__init__(f"Echec du backup: {reason}", code="BACKUP_FAILED")
        self.reason = reason
        self.diagnostics = diagnostics


class BackupTimeoutError(BackupExecutionError):
    """Leve quand le dump depasse le temps alloue."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"delai depasse apres {timeout_seconds:g}s")
        self.code = "BACKUP_TIMEOUT"
        self.timeout_seconds = timeout_seconds


class BackupInProgressError(DomainException):
    """Leve quand un backup est deja en cours d'execution."""

    def __init__(self) -> None:
        super().__init__(
            "Un backup est deja en cours. Reessayer dans quelques instants.",
            code="BACKUP_IN_PROGRESS"
        )


class InvalidFilenameError(DomainException):
    """Leve quand un nom de fichier ne respecte pas le format des backups."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Nom de fichier invalide: '{value}'. "
            "Format attendu: backup-<horodatage>.backup",
            code="INVALID_FILENAME"
        )
        self.invalid_value = value


class ArtifactNotFoundError(DomainException):
    """Leve quand un fichier de backup n'existe pas."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            f"Fichier de backup non trouve: '{filename}'",
            code="BACKUP_NOT_FOUND"
        )
        self.filename = filename


class ConfirmationMismatchError(DomainException):
    """Leve quand le code de confirmation ne correspond pas."""

    def __init__(self) -> None:
        super().__init__(
            "Le code de confirmation ne correspond pas. Aucune donnee n'a ete modifiee.",
            code="CONFIRMATION_MISMATCH"
        )


class MaintenanceInProgressError(DomainException):
    """Leve quand un reset ou une restauration est deja en cours."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Une operation de maintenance ({operation}) est deja en cours.",
            code="MAINTENANCE_IN_PROGRESS"
        )
        self.operation = operation


class ResetExecutionError(DomainException):
    """
    Leve quand la phase destructive du reset echoue.

    Le backup pre-reset existe toujours: les donnees sont recuperables.
    """

    def __init__(self, backup_filename: str, reason: str, rolled_back: bool) -> None:
        state = (
            "Les modifications ont ete annulees."
            if rolled_back
            else "Le reset a pu etre applique partiellement."
        )
        super().__init__(
            f"Echec du reset: {reason}. {state} Vos donnees sont en securite: "
            f"le backup '{backup_filename}' a ete cree avant la tentative.",
            code="RESET_FAILED"
        )
        self.backup_filename = backup_filename
        self.reason = reason
        self.rolled_back = rolled_back


class RestoreExecutionError(DomainException):
    """Leve quand pg_restore echoue apres le backup de securite."""

    def __init__(self, filename: str, backup_filename: str, reason: str) -> None:
        super().__init__(
            f"Echec de la restauration de '{filename}': {reason}. "
            f"Le backup '{backup_filename}' a ete cree avant la tentative.",
            code="RESTORE_FAILED"
        )
        self.filename = filename
        self.backup_filename = backup_filename
        self.reason = reason
