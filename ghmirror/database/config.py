"""Data store configuration module.

Provides type-safe configuration for the local cache database file with
environment variable support and sensible defaults.
"""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FILE_NAME = "GitHubCache.db"


class DataStoreConfig(BaseSettings):
    """Data store configuration with environment variable support.

    Environment variables:
    - GHMIRROR_STORE_FOLDER_PATH: Directory holding the cache file
      (default: ~/.ghmirror)
    - GHMIRROR_STORE_FILE_NAME: Cache file name (default: GitHubCache.db)
    - GHMIRROR_STORE_ECHO_SQL: Log every SQL statement (default: false)
    """

    folder_path: Path = Field(
        default_factory=lambda: Path.home() / ".ghmirror",
        description="Directory that holds the cache database file",
    )
    file_name: str = Field(
        default=DEFAULT_FILE_NAME, description="Cache database file name"
    )
    echo_sql: bool = Field(
        default=False, description="Enable SQL statement logging (development only)"
    )

    model_config = SettingsConfigDict(
        env_prefix="GHMIRROR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: Any) -> Any:
        """Reject names that would escape the configured folder."""
        if not v or "/" in v or "\\" in v:
            raise ValueError("file_name must be a bare file name")
        return v

    @property
    def path(self) -> Path:
        """Full path of the cache database file."""
        return self.folder_path / self.file_name

    def get_sqlalchemy_url(self, path: Path | None = None) -> str:
        """Get SQLAlchemy-compatible async SQLite URL."""
        return f"sqlite+aiosqlite:///{path or self.path}"
