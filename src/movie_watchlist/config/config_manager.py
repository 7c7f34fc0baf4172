"""Loading of the YAML configuration file."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..utils.exceptions import ConfigurationError
from .models import Config

CONFIG_ENV_VAR = "MOVIE_WATCHLIST_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "omdb": {
        "api_key": "${OMDB_API_KEY}",
    },
    "tmdb": {
        "api_key": "${TMDB_API_KEY}",
    },
    "storage": {
        "database_url": "sqlite:///data/watchlist.db",
        "images_path": "data/images",
    },
    "logging": {
        "level": "INFO",
    },
    "app": {
        "max_workers": 10,
        "queue_capacity": 100,
    },
}


class ConfigManager:
    """Finds, parses and validates the configuration, caching the result.

    Without an explicit path the first existing file among
    ``$MOVIE_WATCHLIST_CONFIG``, ``./config/config.yaml``, ``./config.yaml``
    and ``~/.config/movie_watchlist/config.yaml`` is used. ``${VAR}``
    references are expanded after loading ``.env`` files.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_path: Explicit configuration file, or None to search.
        """
        self._config_path = config_path
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load the configuration unless it is already cached.

        Raises:
            FileNotFoundError: If there is no configuration file.
            ConfigurationError: If the file is not valid YAML or fails validation.
        """
        if self._config is None:
            self._config = self._parse(self._find_config_file())
        return self._config

    def reload_config(self) -> Config:
        """Drop the cached configuration and load it again."""
        self._config = None
        return self.load_config()

    def get_config(self) -> Config:
        """Get the cached configuration, loading it on first use."""
        return self.load_config()

    @staticmethod
    def candidate_paths() -> List[Path]:
        """Locations searched when no explicit path is given, in order."""
        paths = [
            Path.cwd() / "config" / "config.yaml",
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "movie_watchlist" / "config.yaml",
        ]
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            paths.insert(0, Path(env_path))
        return paths

    def _find_config_file(self) -> Path:
        if self._config_path is not None:
            if not self._config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self._config_path}")
            return self._config_path

        candidates = self.candidate_paths()
        found = next((path for path in candidates if path.exists()), None)
        if found is None:
            searched = ", ".join(str(path) for path in candidates)
            raise FileNotFoundError(f"No configuration file found (searched: {searched})")
        return found

    def _parse(self, path: Path) -> Config:
        try:
            return Config(**self._read_yaml(path))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        """Read a YAML mapping, expanding environment variables first.

        A ``.env`` file next to the configuration, then one in the working
        directory, is loaded so its variables can be referenced. Variables
        already set in the environment win.

        Raises:
            ConfigurationError: If the file is not a YAML mapping.
        """
        load_dotenv(path.parent / ".env")
        load_dotenv()

        text = os.path.expandvars(path.read_text(encoding="utf-8"))
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        return data

    @classmethod
    def create_default_config(cls, output_path: Path) -> None:
        """Write a starter configuration that reads API keys from the environment."""
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(DEFAULT_CONFIG, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config_file(self, config_path: Path) -> bool:
        """Check a configuration file without caching it.

        Returns:
            True if the file loads and validates.
        """
        try:
            self._parse(config_path)
        except (ConfigurationError, OSError):
            return False
        return True
