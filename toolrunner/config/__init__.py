"""Module de configuration."""

from toolrunner.config.loader import (
    ConfigFileLoader,
    ConfigLoader,
    FileConfigLoader,
)

__all__ = [
    "ConfigLoader",
    "FileConfigLoader",
    "ConfigFileLoader",
]
