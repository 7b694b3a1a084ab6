"""Module de gestion des erreurs."""

from toolrunner.errors.base import ErrorHandler, ErrorHandlerChain
from toolrunner.errors.exceptions import (ApplicationError,
                                          ConfigurationError,
                                          ToolRunnerError,
                                          ToolLaunchError,
                                          ToolExitError)
from toolrunner.errors.console_handler import ConsoleErrorHandler
from toolrunner.errors.logger_handler import LoggerErrorHandler


__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "ToolRunnerError",
    "ToolLaunchError",
    "ToolExitError",
    "ErrorHandler",
    "ConsoleErrorHandler",
    "LoggerErrorHandler",
    "ErrorHandlerChain",
]
