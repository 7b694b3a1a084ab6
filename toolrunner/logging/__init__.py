"""Module de logging."""

from toolrunner.logging.base import Logger
from toolrunner.logging.file_logger import FileLogger
from toolrunner.logging.null_logger import NullLogger

__all__ = [
    "Logger",
    "FileLogger",
    "NullLogger",
]
