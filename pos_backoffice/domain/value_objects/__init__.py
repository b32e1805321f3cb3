"""
Value Objects du domaine.

Les Value Objects sont des objets immuables qui encapsulent
des valeurs avec leur logique de validation.

Caracteristiques:
    - Immuables (frozen dataclasses)
    - Valides par construction
    - Comparaison par valeur
"""

from pos_backoffice.domain.value_objects.backup_filename import BackupFilename
from pos_backoffice.domain.value_objects.cron_expression import CronExpression

__all__ = [
    "BackupFilename",
    "CronExpression",
]
