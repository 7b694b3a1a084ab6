"""Chargement de fichiers de configuration (TOML, JSON)."""

import json
import tomllib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Generic, TypeVar, Union

from toolrunner.errors.exceptions import ConfigurationError

# Type générique pour l'objet de configuration produit
T = TypeVar("T")


class ConfigLoader(ABC):
    """
    Interface abstraite pour le chargement de configuration.

    Permet l'injection de dépendance et facilite les tests
    en permettant de substituer l'implémentation réelle par un mock.
    """

    @abstractmethod
    def load(
        self,
        config_path: Union[str, Path],
        schema: type | None = None
    ) -> Union[Dict[str, Any], Any]:
        """
        Charge un fichier de configuration.

        Args:
            config_path: Chemin vers le fichier de configuration
            schema: Classe Pydantic BaseModel optionnelle pour
                validation. Si fourni, retourne une instance
                du modèle. Si None, retourne un dict brut.

        Returns:
            Dictionnaire de configuration ou instance du schema
        """
        pass


class FileConfigLoader(ConfigLoader):
    """
    Chargeur de configuration depuis fichiers.

    Supporte les formats TOML et JSON, détectés automatiquement
    par l'extension du fichier. Supporte optionnellement la
    validation via un modèle Pydantic BaseModel.
    """

    def load(
        self,
        config_path: Union[str, Path],
        schema: type | None = None
    ) -> Union[Dict[str, Any], Any]:
        """
        Charge un fichier de configuration TOML ou JSON.

        Args:
            config_path: Chemin vers le fichier de configuration
            schema: Classe Pydantic BaseModel optionnelle

        Returns:
            Dictionnaire de configuration ou instance du schema

        Raises:
            FileNotFoundError: Si le fichier n'existe pas
            ValueError: Si l'extension n'est pas supportée
            ImportError: Si schema fourni mais pydantic absent
            TypeError: Si schema n'est pas un BaseModel
        """
        path = Path(config_path)

        if not path.exists():
            raise FileNotFoundError(
                f"Fichier de configuration non trouvé: {path}"
            )

        suffix = path.suffix.lower()

        if suffix == ".toml":
            with open(path, "rb") as f:
                raw_config = tomllib.load(f)
        elif suffix == ".json":
            with open(path, "r", encoding="utf-8") as f:
                raw_config = json.load(f)
        else:
            raise ValueError(
                f"Extension non supportée: {suffix}. "
                "Utilisez .toml ou .json"
            )

        if schema is None:
            return raw_config

        return self._validate_with_schema(raw_config, schema)

    @staticmethod
    def _validate_with_schema(
        data: Dict[str, Any], schema: type
    ) -> Any:
        """Valide un dict via un modèle Pydantic.

        Raises:
            ImportError: Si pydantic n'est pas installé.
            TypeError: Si schema n'est pas un BaseModel.
        """
        try:
            from pydantic import BaseModel
        except ImportError:
            raise ImportError(
                "pydantic est requis pour la validation "
                "de schema. Installez-le avec: "
                "pip install python-toolrunner[validation]"
            )

        if not (
            isinstance(schema, type)
            and issubclass(schema, BaseModel)
        ):
            raise TypeError(
                f"Le schema doit être une sous-classe de "
                f"pydantic.BaseModel, reçu: {schema}"
            )

        return schema.model_validate(data)


class ConfigFileLoader(ABC, Generic[T]):
    """Classe de base abstraite pour les chargeurs de configuration typés.

    Charge un fichier de configuration (TOML ou JSON) et extrait une
    section pour construire un objet typé.

    Example:
        >>> class ExecLoader(ConfigFileLoader[ExecOptions]):
        ...     def load(self, section: str = "exec") -> ExecOptions:
        ...         data = self._get_section(section)
        ...         return ExecOptions(**data)
    """

    def __init__(
        self,
        config_path: str | Path,
        config_loader: ConfigLoader | None = None
    ) -> None:
        """Initialise le loader en chargeant le fichier de configuration.

        Args:
            config_path: Chemin vers le fichier de configuration
                (.toml ou .json).
            config_loader: Chargeur de configuration injectable
                (DIP). Si None, utilise FileConfigLoader par défaut.

        Raises:
            FileNotFoundError: Si le fichier de configuration n'existe pas.
            ValueError: Si l'extension du fichier n'est pas supportée.
        """
        loader = config_loader or FileConfigLoader()
        self._config: dict[str, Any] = loader.load(config_path)

    @property
    def config(self) -> dict[str, Any]:
        """Retourne le dictionnaire de configuration brut."""
        return self._config

    def _get_section(self, section: str) -> dict[str, Any]:
        """Extrait une section du fichier de configuration.

        Args:
            section: Nom de la section à extraire (ex: "exec").

        Returns:
            Dictionnaire contenant les données de la section.

        Raises:
            ConfigurationError: Si la section n'existe pas ou n'est
                pas une table.
        """
        if section not in self._config:
            available = list(self._config.keys())
            raise ConfigurationError(
                f"Section '{section}' non trouvée dans le fichier. "
                f"Sections disponibles: {available}"
            )
        data = self._config[section]
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"La section '{section}' doit être une table, "
                f"reçu: {type(data).__name__}"
            )
        return data

    @abstractmethod
    def load(self, section: str | None = None) -> T:
        """Charge et retourne l'objet de configuration.

        Args:
            section: Nom de la section à charger. Si None, utilise
                la section par défaut du loader.
        """
        pass
