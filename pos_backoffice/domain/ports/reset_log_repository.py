"""
Port ResetLogRepository - Interface pour le journal des resets.

Le journal est append-only: l'application n'en modifie ni n'en
supprime jamais une entree.
"""

from abc import ABC, abstractmethod
from typing import List

from pos_backoffice.domain.entities.reset_log import ResetLogEntry


class ResetLogRepository(ABC):
    """
    Interface Repository pour le journal des resets.

    Implementee par SqlAlchemyResetLogRepository.
    """

    @abstractmethod
    def append(self, entry: ResetLogEntry) -> ResetLogEntry:
        """Ajoute une entree et la retourne avec son identifiant."""
        ...

    @abstractmethod
    def list(self, limit: int = 100) -> List[ResetLogEntry]:
        """Liste les entrees, de la plus recente a la plus ancienne."""
        ...
