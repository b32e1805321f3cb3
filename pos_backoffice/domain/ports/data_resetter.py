"""
Port DataResetter - Interface pour la phase destructive du reset.

Responsabilite unique:
----------------------
Vider les donnees transactionnelles (ou tout le schema metier) et
compter les lignes pour le journal.

La classification des tables (transactionnelles / donnees de reference)
appartient au schema relationnel, donc a l'implementation.
"""

from abc import ABC, abstractmethod
from typing import Dict


class DataResetError(Exception):
    """
    Echec de la phase destructive.

    Attributes:
        reason: Cause technique.
        rolled_back: True si le stockage garantit l'annulation complete.
    """

    def __init__(self, reason: str, rolled_back: bool) -> None:
        super().__init__(reason)
        self.reason = reason
        self.rolled_back = rolled_back


class DataResetter(ABC):
    """
    Interface de reset des donnees.

    Implementee par SqlAlchemyDataResetter.
    """

    @abstractmethod
    def count_rows(self) -> Dict[str, int]:
        """Retourne le nombre de lignes par table metier."""
        ...

    @abstractmethod
    def reset(self, preserve_master_data: bool) -> None:
        """
        Execute la phase destructive.

        Args:
            preserve_master_data: True pour ne vider que les tables
                transactionnelles, False pour reinitialiser tout le schema.

        Raises:
            DataResetError: La phase destructive a echoue.
        """
        ...
