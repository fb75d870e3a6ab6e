"""Pydantic configuration models for ghmirror.

The configuration hierarchy follows this structure:
- Config: Root configuration containing all subsystems
- SystemConfig: Logging level and deployment environment
- DataStoreConfig: Location of the cache database file
- SyncSettings: Retention windows and thresholds used by sync passes
- GitHubSettings: API endpoint, transport settings and account tokens

Environment variables are substituted using the format ${VAR_NAME} with
optional defaults: ${VAR_NAME:default_value}
"""

import os
import re
from datetime import timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghmirror.database.config import DataStoreConfig
from ghmirror.github.client import GitHubClientConfig

# Dependabot; its suites never block a pull request.
DEPENDABOT_APP_ID = 29110

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def substitute_value(value: Any) -> Any:
    """Recursively replace ``${VAR}`` / ``${VAR:default}`` in string values.

    Raises:
        ValueError: If a variable without default is not set
    """
    if isinstance(value, str):

        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)

            env_value = os.getenv(var_name)
            if env_value is not None:
                return env_value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Required environment variable '{var_name}' not found")

        return _ENV_PATTERN.sub(replacer, value)
    elif isinstance(value, dict):
        return {k: substitute_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_value(item) for item in value]
    else:
        return value


class BaseConfigModel(BaseModel):
    """Base configuration model with environment variable substitution."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def substitute_env_vars(cls, values: Any) -> Any:
        """Substitute environment variables in string values."""
        if not isinstance(values, dict):
            return values
        return substitute_value(values)


class SystemConfig(BaseConfigModel):
    """Core system configuration settings."""

    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="System-wide logging level"
    )

    environment: str = Field(
        default="development",
        description="Deployment environment (development, staging, production)",
    )


class SyncSettings(BaseSettings):
    """Windows and thresholds applied by sync passes.

    Environment variables use the ``GHMIRROR_SYNC_`` prefix, for example
    ``GHMIRROR_SYNC_PULL_REQUEST_STALE_TIME=P14D``.
    """

    notification_retention: timedelta = Field(
        default=timedelta(days=7), description="Age after which notifications are pruned"
    )
    search_retention: timedelta = Field(
        default=timedelta(days=7), description="Age after which saved searches are pruned"
    )
    last_observed_delete_span: timedelta = Field(
        default=timedelta(minutes=6),
        description="Issues, pull requests and releases not seen this recently are removed",
    )
    pull_request_stale_time: timedelta = Field(
        default=timedelta(days=30),
        description="Pull requests not updated this recently produce no check notifications",
    )
    search_issue_refresh_window: timedelta = Field(
        default=timedelta(minutes=1),
        description="Search members not refreshed this recently are dropped",
    )
    search_update_threshold: timedelta = Field(
        default=timedelta(minutes=2),
        description="Minimum age before a saved search's timestamp is rewritten",
    )
    ignored_check_suite_app_ids: list[int] = Field(
        default_factory=lambda: [DEPENDABOT_APP_ID],
        description="Apps whose check suites are not cached",
    )
    use_public_client_as_fallback: bool = Field(
        default=False,
        description="Try the anonymous client after every logged-in account",
    )

    model_config = SettingsConfigDict(
        env_prefix="GHMIRROR_SYNC_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "notification_retention",
        "search_retention",
        "last_observed_delete_span",
        "pull_request_stale_time",
        "search_issue_refresh_window",
    )
    @classmethod
    def validate_positive_span(cls, v: timedelta) -> timedelta:
        """Reject zero and negative windows."""
        if v <= timedelta(0):
            raise ValueError("Time span must be positive")
        return v


class GitHubSettings(BaseConfigModel):
    """GitHub API access configuration."""

    base_url: str = Field(
        default="https://api.github.com", description="GitHub API base URL"
    )
    timeout: int = Field(default=30, ge=1, le=300, description="Request timeout in seconds")
    max_retries: int = Field(
        default=3, ge=0, le=10, description="Retries for transport and server errors"
    )
    user_agent: str = Field(default="ghmirror/0.1", description="User-Agent header value")
    tokens: list[str] = Field(
        default_factory=list,
        description="Personal access tokens, one per logged-in developer account",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("tokens")
    @classmethod
    def validate_tokens(cls, v: list[str]) -> list[str]:
        """Drop blank entries left by unset environment variables."""
        return [token.strip() for token in v if token and token.strip()]

    def client_config(self) -> GitHubClientConfig:
        """Build the transport settings for a ``GitHubClient``."""
        return GitHubClientConfig(
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=self.max_retries,
            user_agent=self.user_agent,
        )


class Config(BaseConfigModel):
    """Root configuration containing all subsystem configurations."""

    system: SystemConfig = Field(
        default_factory=SystemConfig, description="Core system configuration"
    )

    store: DataStoreConfig = Field(
        default_factory=DataStoreConfig, description="Cache database configuration"
    )

    sync: SyncSettings = Field(
        default_factory=SyncSettings, description="Sync pass windows and thresholds"
    )

    github: GitHubSettings = Field(
        default_factory=GitHubSettings, description="GitHub API configuration"
    )
