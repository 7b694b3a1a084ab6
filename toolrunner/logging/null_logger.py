"""Logger inactif utilisé par défaut."""

from toolrunner.logging.base import Logger


class NullLogger(Logger):
    """Logger qui ignore tous les messages.

    Injecté par défaut dans ToolRunner : les traces ne sont émises
    que si l'appelant fournit son propre Logger.
    """

    def log_debug(self, message: str) -> None:
        pass

    def log_info(self, message: str) -> None:
        pass

    def log_warning(self, message: str) -> None:
        pass

    def log_error(self, message: str) -> None:
        pass
