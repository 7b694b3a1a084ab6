"""Implémentation concrète du logger avec fichier."""

import logging
import os
from typing import Any, Dict, Optional, Tuple

from toolrunner.logging.base import Logger

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class FileLogger(Logger):
    """
    Logger qui écrit les traces d'exécution dans un fichier.

    Caractéristiques:
    - Logger unique par fichier (évite les conflits entre runners)
    - Encodage UTF-8 explicite
    - Flush immédiat après chaque log
    - Pas de propagation (évite les logs en double)
    - Support optionnel de la sortie console (stderr)
    """

    def __init__(
        self,
        log_file: str,
        config: Optional[Dict[str, Any]] = None,
        console_output: bool = False
    ) -> None:
        """
        Initialise le logger.

        Args:
            log_file: Chemin du fichier de log
            config: Configuration optionnelle sous forme de dict.
                    Clés supportées: logging.level, logging.format
            console_output: Activer la sortie console en plus du fichier
        """
        self.log_file = log_file

        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        level_name, log_format = self._read_config(config)
        log_level = getattr(logging, level_name.upper(), logging.INFO)

        self.logger = logging.getLogger(f"toolrunner.{log_file}")
        self.logger.setLevel(log_level)

        # Éviter les handlers dupliqués
        if not self.logger.handlers:
            formatter = logging.Formatter(log_format)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)
            self.handler = file_handler

            if console_output:
                console_handler = logging.StreamHandler()
                console_handler.setLevel(log_level)
                console_handler.setFormatter(formatter)
                self.logger.addHandler(console_handler)
        else:
            self.handler = self.logger.handlers[0]

        self.logger.propagate = False

    @staticmethod
    def _read_config(
        config: Optional[Dict[str, Any]]
    ) -> Tuple[str, str]:
        """Extrait le niveau et le format de la section [logging].

        Args:
            config: Dictionnaire de configuration ou None.

        Returns:
            Tuple (nom du niveau, format).
        """
        if not config:
            return DEFAULT_LEVEL, DEFAULT_FORMAT
        logging_cfg = config.get("logging", {})
        return (
            str(logging_cfg.get("level", DEFAULT_LEVEL)),
            logging_cfg.get("format", DEFAULT_FORMAT),
        )

    def _flush(self) -> None:
        """Force l'écriture immédiate sur le disque."""
        if getattr(self, "handler", None):
            self.handler.flush()

    def log_debug(self, message: str) -> None:
        """Log un message de trace."""
        self.logger.debug(message)
        self._flush()

    def log_info(self, message: str) -> None:
        """Log un message d'information."""
        self.logger.info(message)
        self._flush()

    def log_warning(self, message: str) -> None:
        """Log un avertissement."""
        self.logger.warning(message)
        self._flush()

    def log_error(self, message: str) -> None:
        """Log une erreur."""
        self.logger.error(message)
        self._flush()
