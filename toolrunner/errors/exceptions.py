"""
Module contenant les exceptions personnalisées de toolrunner.

Ce module suit le principe SRP en isolant la gestion des exceptions.
"""


class ApplicationError(Exception):
    """Exception de base pour toutes les erreurs de la bibliothèque."""
    pass


class ConfigurationError(ApplicationError):
    """Erreur dans un fichier ou une section de configuration."""
    pass


class ToolRunnerError(ApplicationError):
    """Exception de base pour l'exécution d'un outil externe.

    Attributes:
        tool_path: Chemin de l'outil concerné.
    """

    def __init__(self, message: str, tool_path: str) -> None:
        super().__init__(message)
        self.tool_path = tool_path


class ToolLaunchError(ToolRunnerError):
    """Le processus n'a pas pu être lancé (binaire absent, permissions).

    L'OSError d'origine est disponible via ``__cause__``.
    """

    def __init__(self, tool_path: str, reason: str) -> None:
        super().__init__(f"{tool_path} failed. {reason}", tool_path)
        self.reason = reason


class ToolExitError(ToolRunnerError):
    """Le verdict de l'exécution est un échec.

    Attributes:
        return_code: Code de retour du processus.
        stderr_failure: True si l'échec provient d'une écriture sur
            stderr avec fail_on_stderr activé.
    """

    def __init__(
        self,
        tool_path: str,
        return_code: int,
        stderr_failure: bool = False,
    ) -> None:
        super().__init__(
            f"{tool_path} failed with return code: {return_code}",
            tool_path,
        )
        self.return_code = return_code
        self.stderr_failure = stderr_failure
