"""
Unit tests for configuration models.

Why: Sync windows and API settings come from YAML and the environment;
     bad values must be rejected before a sync pass starts
What: Tests defaults, environment variable substitution, validators and
      the GitHub client settings bridge
How: Instantiates the pydantic models directly with monkeypatched
     environment variables
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from ghmirror.config.models import (
    DEPENDABOT_APP_ID,
    Config,
    GitHubSettings,
    LogLevel,
    SyncSettings,
    SystemConfig,
    substitute_value,
)


class TestSubstituteValue:
    """Test ${VAR} / ${VAR:default} substitution."""

    def test_substitutes_set_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a set variable replaces its placeholder."""
        monkeypatch.setenv("GHM_TEST_TOKEN", "secret")

        assert substitute_value("token-${GHM_TEST_TOKEN}") == "token-secret"

    def test_uses_default_when_unset(self) -> None:
        """Test the default is used for an unset variable."""
        assert substitute_value("${GHM_TEST_UNSET:fallback}") == "fallback"

    def test_empty_default(self) -> None:
        """Test an explicitly empty default."""
        assert substitute_value("${GHM_TEST_UNSET:}") == ""

    def test_missing_variable_raises(self) -> None:
        """
        Why: A missing credential must fail loudly rather than become ""
        What: Tests that an unset variable without default raises
        How: Substitutes a placeholder with no default
        """
        with pytest.raises(ValueError, match="GHM_TEST_UNSET"):
            substitute_value("${GHM_TEST_UNSET}")

    def test_recurses_into_containers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test nested dicts and lists are substituted; other types pass through."""
        monkeypatch.setenv("GHM_TEST_TOKEN", "secret")

        result = substitute_value({"tokens": ["${GHM_TEST_TOKEN}", "plain"], "timeout": 5})

        assert result == {"tokens": ["secret", "plain"], "timeout": 5}


class TestSystemConfig:
    """Test SystemConfig."""

    def test_defaults(self) -> None:
        """Test default log level and environment."""
        config = SystemConfig()

        assert config.log_level == LogLevel.INFO
        assert config.environment == "development"

    def test_rejects_unknown_fields(self) -> None:
        """Test that typos in the config file are reported."""
        with pytest.raises(ValidationError):
            SystemConfig(log_levle="DEBUG")  # type: ignore[call-arg]

    def test_rejects_invalid_level(self) -> None:
        """Test that an unknown log level is rejected."""
        with pytest.raises(ValidationError):
            SystemConfig(log_level="LOUD")  # type: ignore[arg-type]


class TestSyncSettings:
    """Test SyncSettings."""

    def test_defaults(self) -> None:
        """
        Why: The default windows define observable pruning behavior
        What: Tests every default
        How: Instantiates with no environment
        """
        settings = SyncSettings()

        assert settings.notification_retention == timedelta(days=7)
        assert settings.search_retention == timedelta(days=7)
        assert settings.last_observed_delete_span == timedelta(minutes=6)
        assert settings.pull_request_stale_time == timedelta(days=30)
        assert settings.search_issue_refresh_window == timedelta(minutes=1)
        assert settings.search_update_threshold == timedelta(minutes=2)
        assert settings.ignored_check_suite_app_ids == [DEPENDABOT_APP_ID]
        assert settings.use_public_client_as_fallback is False

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test GHMIRROR_SYNC_* variables override defaults."""
        monkeypatch.setenv("GHMIRROR_SYNC_PULL_REQUEST_STALE_TIME", "P14D")
        monkeypatch.setenv("GHMIRROR_SYNC_USE_PUBLIC_CLIENT_AS_FALLBACK", "true")

        settings = SyncSettings()

        assert settings.pull_request_stale_time == timedelta(days=14)
        assert settings.use_public_client_as_fallback is True

    @pytest.mark.parametrize("value", [timedelta(0), timedelta(seconds=-1)])
    def test_rejects_non_positive_span(self, value: timedelta) -> None:
        """Test that zero and negative windows are rejected."""
        with pytest.raises(ValidationError):
            SyncSettings(last_observed_delete_span=value)


class TestGitHubSettings:
    """Test GitHubSettings."""

    def test_base_url_validation(self) -> None:
        """Test that a trailing slash is removed and other schemes rejected."""
        assert GitHubSettings(base_url="https://ghe.example.com/api/v3/").base_url == (
            "https://ghe.example.com/api/v3"
        )
        with pytest.raises(ValidationError):
            GitHubSettings(base_url="ftp://example.com")

    @pytest.mark.parametrize("timeout", [0, 301])
    def test_timeout_bounds(self, timeout: int) -> None:
        """Test the timeout range."""
        with pytest.raises(ValidationError):
            GitHubSettings(timeout=timeout)

    def test_blank_tokens_dropped(self) -> None:
        """
        Why: ${VAR:} placeholders for absent accounts leave empty strings
        What: Tests that blank tokens are removed and others trimmed
        How: Builds settings with a mix of tokens
        """
        settings = GitHubSettings(tokens=["ghp_one", "", "  ", " ghp_two "])

        assert settings.tokens == ["ghp_one", "ghp_two"]

    def test_client_config(self) -> None:
        """Test transport settings are carried into the client config."""
        settings = GitHubSettings(
            base_url="https://ghe.example.com/api/v3", timeout=10, max_retries=1
        )

        client_config = settings.client_config()

        assert client_config.base_url == "https://ghe.example.com/api/v3"
        assert client_config.timeout == 10
        assert client_config.max_retries == 1
        assert client_config.user_agent == settings.user_agent


class TestConfig:
    """Test the root configuration."""

    def test_defaults(self) -> None:
        """Test every section has defaults."""
        config = Config()

        assert config.system.log_level == LogLevel.INFO
        assert config.store.file_name == "GitHubCache.db"
        assert config.github.tokens == []
        assert config.sync.pull_request_stale_time == timedelta(days=30)

    def test_nested_substitution(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        """
        Why: Tokens and paths are normally injected through the environment
        What: Tests substitution reaches nested sections
        How: Builds Config from a dict with placeholders
        """
        monkeypatch.setenv("GHM_TEST_TOKEN", "ghp_secret")
        monkeypatch.setenv("GHM_TEST_FOLDER", str(tmp_path))

        config = Config(
            **{
                "github": {"tokens": ["${GHM_TEST_TOKEN}"]},
                "store": {"folder_path": "${GHM_TEST_FOLDER}", "file_name": "cache.db"},
            }
        )

        assert config.github.tokens == ["ghp_secret"]
        assert config.store.path == tmp_path / "cache.db"

    def test_rejects_unknown_section(self) -> None:
        """Test that unknown top-level sections are rejected."""
        with pytest.raises(ValidationError):
            Config(**{"databse": {}})
