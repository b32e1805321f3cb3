"""
Port DatabaseDumper - Interface vers l'outil de dump natif de la base.

Responsabilite unique:
----------------------
Produire un dump binaire de la base dans un fichier, et le restaurer.

L'outil est une boite noire: il reussit et produit un fichier, ou
echoue avec un statut non nul et une sortie d'erreur.
"""

from abc import ABC, abstractmethod


class DatabaseDumper(ABC):
    """
    Interface de l'outil de dump.

    Implementee par PgDumpTool (pg_dump / pg_restore).
    """

    @abstractmethod
    def dump(self, destination: str) -> None:
        """
        Ecrit un dump complet de la base dans `destination`.

        Raises:
            BackupExecutionError: L'outil a echoue.
            BackupTimeoutError: L'outil a depasse le delai.
        """
        ...

    @abstractmethod
    def restore(self, source: str, clean: bool = True) -> None:
        """
        Restaure la base depuis le dump `source`.

        Args:
            source: Chemin du fichier de dump.
            clean: Supprime les objets existants avant restauration.

        Raises:
            BackupExecutionError: L'outil a echoue.
            BackupTimeoutError: L'outil a depasse le delai.
        """
        ...
