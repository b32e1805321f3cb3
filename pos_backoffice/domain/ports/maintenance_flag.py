"""
Port MaintenanceFlag - Signal "reset en cours" partage entre processus.

Responsabilite unique:
----------------------
Indiquer au scheduler (eventuellement dans un autre processus) qu'une
operation destructive est en cours, afin de ne pas lancer de backup
automatique pendant ce temps.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional


class MaintenanceFlag(ABC):
    """
    Interface du drapeau de maintenance.

    Implementee par FileMaintenanceFlag.
    """

    @abstractmethod
    def raise_flag(self, operation: str) -> None:
        """Leve le drapeau pour `operation` (reset, restore)."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Baisse le drapeau."""
        ...

    @abstractmethod
    def refresh(self) -> None:
        """Repousse la peremption d'un drapeau leve (sans effet sinon)."""
        ...

    @abstractmethod
    def is_active(self, now: Optional[datetime] = None) -> bool:
        """True si le drapeau est leve et pas encore perime."""
        ...
