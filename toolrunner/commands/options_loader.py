"""Chargeur d'ExecOptions depuis un fichier de configuration.

Example:
    Chargement depuis un fichier TOML :

        loader = ExecOptionsLoader("config/build.toml")
        options = loader.load()
        code = await ToolRunner("make").exec(options)

    Fichier de configuration attendu :

        [exec]
        cwd = "/srv/project"
        fail_on_stderr = true
        ignore_return_code = false

        [exec.env]
        LANG = "C"

Les flux de sortie ne sont pas configurables par fichier.
"""

from pathlib import Path
from typing import Any

from toolrunner.commands.base import ExecOptions
from toolrunner.config.loader import ConfigFileLoader, ConfigLoader
from toolrunner.errors.exceptions import ConfigurationError

_BOOL_KEYS = ("silent", "fail_on_stderr", "ignore_return_code")
_STR_KEYS = ("cwd", "encoding")


class ExecOptionsLoader(ConfigFileLoader[ExecOptions]):
    """Chargeur de configuration pour ExecOptions.

    Attributes:
        DEFAULT_SECTION: Nom de la section par défaut ("exec").
    """

    DEFAULT_SECTION: str = "exec"
    ALLOWED_KEYS = frozenset(_BOOL_KEYS + _STR_KEYS + ("env",))

    def __init__(
        self,
        config_path: str | Path,
        config_loader: ConfigLoader | None = None
    ) -> None:
        super().__init__(config_path, config_loader)

    def load(self, section: str | None = None) -> ExecOptions:
        """Charge et retourne des ExecOptions.

        Args:
            section: Nom de la section à charger. Par défaut "exec".

        Returns:
            ExecOptions ; les clés absentes gardent leur défaut.

        Raises:
            ConfigurationError: Si la section est absente, contient
                une clé inconnue ou une valeur du mauvais type.
        """
        section_name = section or self.DEFAULT_SECTION
        data: dict[str, Any] = self._get_section(section_name)

        unknown = sorted(set(data) - self.ALLOWED_KEYS)
        if unknown:
            raise ConfigurationError(
                f"Clés inconnues dans [{section_name}]: {unknown}"
            )

        for key in _BOOL_KEYS:
            if key in data and not isinstance(data[key], bool):
                raise ConfigurationError(
                    f"[{section_name}] {key} doit être un booléen"
                )
        for key in _STR_KEYS:
            if key in data and not isinstance(data[key], str):
                raise ConfigurationError(
                    f"[{section_name}] {key} doit être une chaîne"
                )

        env = data.get("env")
        if env is not None:
            if not isinstance(env, dict):
                raise ConfigurationError(
                    f"[{section_name}] env doit être une table"
                )
            env = {str(key): str(value) for key, value in env.items()}

        return ExecOptions(
            cwd=data.get("cwd"),
            env=env,
            silent=data.get("silent", False),
            fail_on_stderr=data.get("fail_on_stderr", False),
            ignore_return_code=data.get("ignore_return_code", False),
            encoding=data.get("encoding", "utf-8"),
        )
