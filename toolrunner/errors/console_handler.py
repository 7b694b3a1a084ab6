"""
    ConsoleErrorHandler (générique, configurable)
"""
import sys
from typing import TextIO

from toolrunner.errors.base import ErrorHandler
from toolrunner.errors.exceptions import (ApplicationError,
                                          ConfigurationError,
                                          ToolExitError,
                                          ToolLaunchError)


class ConsoleErrorHandler(ErrorHandler):
    """Handler pour afficher les erreurs dans la console.

    Distingue les erreurs connues (ApplicationError) des erreurs
    inattendues, et affiche un message de solution adapté au type
    d'erreur.
    """

    def __init__(
        self,
        solutions: dict[type[Exception], str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialise le handler console.

        Args:
            solutions: Dictionnaire {TypeException: "message solution"}
                prioritaire sur les suggestions intégrées.
            stream: Flux de sortie (défaut: sys.stderr).
        """
        self.solutions = solutions or {}
        self.stream = stream

    def _write(self, message: str) -> None:
        print(message, file=self.stream or sys.stderr)

    def handle(self, error: Exception) -> None:
        """Affiche l'erreur dans la console avec des messages utilisateur.

        Args:
            error: L'exception à afficher.
        """
        if isinstance(error, ApplicationError):
            self._handle_known_error(error)
        else:
            self._handle_unknown_error(error)

    def _solution_for(self, error: ApplicationError) -> str:
        """Retourne la suggestion la plus spécifique pour l'erreur."""
        for error_type, solution in self.solutions.items():
            if isinstance(error, error_type):
                return solution
        if isinstance(error, ToolLaunchError):
            return ("Vérifiez que l'outil est installé, présent dans le "
                    "PATH et exécutable.")
        if isinstance(error, ToolExitError):
            if error.stderr_failure:
                return ("L'outil a écrit sur stderr : consultez sa sortie "
                        "ou désactivez fail_on_stderr.")
            return ("Consultez la sortie de l'outil ou utilisez "
                    "ignore_return_code.")
        if isinstance(error, ConfigurationError):
            return "Vérifiez votre fichier de configuration."
        return "Voir les suggestions ci-dessus."

    def _handle_known_error(self, error: ApplicationError) -> None:
        self._write(f"\n🛑 {type(error).__name__}: {error}")
        self._write(f"\n🔧 Solution : {self._solution_for(error)}")

    def _handle_unknown_error(self, error: Exception) -> None:
        self._write(f"\n💥 Erreur inattendue: {error}")
        self._write(f"Type: {type(error).__name__}")
        self._write(
            "\n📋 Cela peut être un bug. Veuillez ouvrir une issue avec "
            "ces informations."
        )
