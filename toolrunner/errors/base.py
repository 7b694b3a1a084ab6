""" Interfaces abstraites pour la gestion des erreurs"""

import sys
from abc import ABC, abstractmethod


class ErrorHandler(ABC):
    """Interface de base pour les handlers d'erreurs.

    Chaque implémentation concrète définit une stratégie
    de traitement des erreurs (affichage console, logging, etc.).
    """

    @abstractmethod
    def handle(self, error: Exception) -> None:
        """Traite une erreur.

        Args:
            error: L'exception à traiter.
        """
        pass


class ErrorHandlerChain:
    """Diffuse les erreurs à tous les handlers enregistrés.

    Chaque erreur est transmise à tous les handlers dans l'ordre
    d'ajout (ex: console puis logger).
    """

    def __init__(self) -> None:
        self.handlers: list[ErrorHandler] = []

    def add_handler(self, handler: ErrorHandler) -> "ErrorHandlerChain":
        """Ajoute un handler à la chaîne.

        Args:
            handler: Le handler d'erreurs à ajouter.

        Returns:
            La chaîne courante pour le chaînage.
        """
        self.handlers.append(handler)
        return self

    def handle(self, error: Exception) -> None:
        """Fait passer l'erreur à travers tous les handlers."""
        for handler in self.handlers:
            handler.handle(error)

    def handle_and_exit(self, error: Exception, exit_code: int = 1) -> None:
        """Gère l'erreur et termine le programme.

        Si l'erreur est un ToolExitError, le code de retour de l'outil
        est réutilisé comme code de sortie lorsqu'il est positif.

        Args:
            error: L'exception à traiter avant la sortie.
            exit_code: Code de sortie par défaut (défaut: 1).
        """
        self.handle(error)
        return_code = getattr(error, "return_code", None)
        if isinstance(return_code, int) and return_code > 0:
            exit_code = return_code
        sys.exit(exit_code)
