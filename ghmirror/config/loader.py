"""Configuration loading.

This module loads the ghmirror configuration from YAML files or plain
dictionaries and validates it against the pydantic models. The loading
hierarchy is:
1. Default values from the models
2. Configuration file (YAML), with ${VAR} substitution
3. ``GHMIRROR_STORE_*`` / ``GHMIRROR_SYNC_*`` environment variables for
   sections the file leaves out
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationFileError, ConfigurationValidationError
from .models import Config

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "GHMIRROR_CONFIG_PATH"
DEFAULT_CONFIG_FILENAME = "config.yaml"


class ConfigurationLoader:
    """Handles loading and validation of configuration from various sources."""

    def __init__(self) -> None:
        """Initialize configuration loader."""
        self._config: Config | None = None
        self._config_file_path: Path | None = None

    @property
    def config(self) -> Config | None:
        """Most recently loaded configuration."""
        return self._config

    @property
    def config_file_path(self) -> Path | None:
        """File the current configuration was read from, if any."""
        return self._config_file_path

    @property
    def is_loaded(self) -> bool:
        """True once a configuration has been loaded."""
        return self._config is not None

    def load_from_file(self, config_path: str | Path) -> Config:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Loaded and validated configuration

        Raises:
            ConfigurationFileError: If file cannot be read or parsed
            ConfigurationValidationError: If configuration validation fails
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationFileError(
                f"Configuration file not found: {config_path}", file_path=str(config_path)
            )

        if not config_path.is_file():
            raise ConfigurationFileError(
                f"Configuration path is not a file: {config_path}",
                file_path=str(config_path),
            )

        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)

            if config_data is None:
                config_data = {}

        except yaml.YAMLError as e:
            raise ConfigurationFileError(
                f"Failed to parse YAML configuration: {e}", file_path=str(config_path)
            ) from e
        except OSError as e:
            raise ConfigurationFileError(
                f"Failed to read configuration file: {e}", file_path=str(config_path)
            ) from e

        if not isinstance(config_data, dict):
            raise ConfigurationFileError(
                "Configuration file must contain a mapping at the top level",
                file_path=str(config_path),
            )

        config = self.load_from_dict(config_data)
        self._config_file_path = config_path.resolve()
        logger.info(f"Loaded configuration from {self._config_file_path}")
        return config

    def load_from_dict(self, config_data: dict[str, Any]) -> Config:
        """Load configuration from a dictionary.

        Args:
            config_data: Configuration data dictionary

        Returns:
            Loaded and validated configuration

        Raises:
            ConfigurationValidationError: If configuration validation fails
        """
        try:
            self._config = Config(**config_data)
        except ValidationError as e:
            raise ConfigurationValidationError(
                f"Configuration validation failed: {e}",
                validation_errors=e.errors(),
            ) from e
        except ValueError as e:
            raise ConfigurationValidationError(
                f"Configuration validation failed: {e}"
            ) from e

        self._config_file_path = None
        return self._config

    def load_default(self) -> Config:
        """Load configuration with default values only."""
        return self.load_from_dict({})

    def find_config_file(self, filename: str = DEFAULT_CONFIG_FILENAME) -> Path | None:
        """Find configuration file in standard locations.

        Search order:
        1. Current working directory
        2. GHMIRROR_CONFIG_PATH environment variable (file or directory)
        3. ~/.ghmirror/
        4. /etc/ghmirror/

        Args:
            filename: Configuration filename to search for

        Returns:
            Path to found configuration file, or None if not found
        """
        search_paths = [Path.cwd() / filename]

        env_path_str = os.getenv(CONFIG_PATH_ENV_VAR)
        if env_path_str:
            env_path = Path(env_path_str)
            if env_path.is_file():
                search_paths.append(env_path)
            else:
                search_paths.append(env_path / filename)

        search_paths.append(Path.home() / ".ghmirror" / filename)
        search_paths.append(Path("/etc/ghmirror") / filename)

        for path in search_paths:
            if path.exists() and path.is_file():
                return path

        return None

    def auto_load(self, config_filename: str = DEFAULT_CONFIG_FILENAME) -> Config:
        """Load from the first standard location holding ``config_filename``.

        Falls back to defaults when no file is found.
        """
        config_path = self.find_config_file(config_filename)

        if config_path is None:
            logger.info("No configuration file found, using defaults")
            return self.load_default()

        return self.load_from_file(config_path)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from ``config_path`` or the standard locations."""
    loader = ConfigurationLoader()
    if config_path:
        return loader.load_from_file(config_path)
    return loader.auto_load()
