"""
toolrunner - Invocation d'outils externes avec verdict uniforme.

Modules disponibles:
- commands: Construction des arguments et exécution (ToolRunner,
  ArgumentBuilder, ExecOptions, ExecResult)
- logging: Gestion des logs (Logger, FileLogger, NullLogger)
- config: Chargement de configuration (TOML, JSON)
- errors: Exceptions et handlers d'erreurs
"""

__version__ = "1.0.0"

from toolrunner.logging import Logger, FileLogger, NullLogger
from toolrunner.config import (
    ConfigLoader,
    FileConfigLoader,
    ConfigFileLoader,
)
from toolrunner.errors import (
    ApplicationError,
    ConfigurationError,
    ToolRunnerError,
    ToolLaunchError,
    ToolExitError,
    ErrorHandler,
    ErrorHandlerChain,
    ConsoleErrorHandler,
    LoggerErrorHandler,
)
from toolrunner.commands import (
    ArgumentBuilder,
    ToolRunner,
    ExecStream,
    ExecOptions,
    ExecResult,
    OutputChunk,
    OutputStream,
    ToolExecutor,
    compute_verdict,
    split_command_line,
    CommandFormatter,
    PlainCommandFormatter,
    AnsiCommandFormatter,
    ExecOptionsLoader,
)

__all__ = [
    # Logging
    "Logger",
    "FileLogger",
    "NullLogger",
    # Config
    "ConfigLoader",
    "FileConfigLoader",
    "ConfigFileLoader",
    # Errors
    "ApplicationError",
    "ConfigurationError",
    "ToolRunnerError",
    "ToolLaunchError",
    "ToolExitError",
    "ErrorHandler",
    "ErrorHandlerChain",
    "ConsoleErrorHandler",
    "LoggerErrorHandler",
    # Commands - Constructeur et exécuteur
    "ArgumentBuilder",
    "ToolRunner",
    "ExecStream",
    "ToolExecutor",
    # Commands - Structures de données
    "ExecOptions",
    "ExecResult",
    "OutputChunk",
    "OutputStream",
    # Commands - Utilitaires
    "compute_verdict",
    "split_command_line",
    # Commands - Formateurs
    "CommandFormatter",
    "PlainCommandFormatter",
    "AnsiCommandFormatter",
    # Commands - Configuration
    "ExecOptionsLoader",
]
