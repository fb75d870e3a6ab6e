"""Configuration management for ghmirror.

This module provides type-safe configuration management with support for:
- YAML configuration files with environment variable substitution
- Environment-only settings for the store and sync sections
- Pydantic-based validation

Example usage:
    from ghmirror.config import load_config

    config = load_config("config.yaml")
    stale_after = config.sync.pull_request_stale_time
"""

import logging

from .exceptions import (
    ConfigurationError,
    ConfigurationFileError,
    ConfigurationValidationError,
)
from .loader import ConfigurationLoader, load_config
from .models import (
    DEPENDABOT_APP_ID,
    BaseConfigModel,
    Config,
    GitHubSettings,
    LogLevel,
    SyncSettings,
    SystemConfig,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | LogLevel = LogLevel.INFO) -> None:
    """Configure root logging with the standard ghmirror format."""
    name = level.value if isinstance(level, LogLevel) else str(level).upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)


__all__ = [
    "DEPENDABOT_APP_ID",
    "LOG_FORMAT",
    "BaseConfigModel",
    "Config",
    "ConfigurationError",
    "ConfigurationFileError",
    "ConfigurationLoader",
    "ConfigurationValidationError",
    "GitHubSettings",
    "LogLevel",
    "SyncSettings",
    "SystemConfig",
    "configure_logging",
    "load_config",
]
