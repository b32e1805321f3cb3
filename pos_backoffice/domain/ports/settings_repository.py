"""
Port SettingsRepository - Interface pour les parametres singletons.

Responsabilite unique:
----------------------
Lire et ecrire BackupSettings et ResetSettings.

Les parametres sont crees avec leurs valeurs par defaut au premier
acces et ne sont jamais supprimes.
"""

from abc import ABC, abstractmethod

from pos_backoffice.domain.entities.settings import BackupSettings, ResetSettings


class SettingsRepository(ABC):
    """
    Interface Repository pour les parametres.

    Implementee par SqlAlchemySettingsRepository.
    """

    @abstractmethod
    def get_backup_settings(self) -> BackupSettings:
        """Retourne les parametres de backup (defauts au premier acces)."""
        ...

    @abstractmethod
    def save_backup_settings(self, settings: BackupSettings) -> BackupSettings:
        """Persiste les parametres de backup."""
        ...

    @abstractmethod
    def get_reset_settings(self) -> ResetSettings:
        """Retourne les parametres de reset (defauts au premier acces)."""
        ...

    @abstractmethod
    def save_reset_settings(self, settings: ResetSettings) -> ResetSettings:
        """Persiste les parametres de reset."""
        ...
