"""
Tests for replay_platform.runtime.config.
"""

import pytest

from core.service import DEFAULT_RECOVERY_DELAYS
from replay_platform.runtime.config import (
    DEFAULT_RECENT_MAX_ITEMS,
    DEFAULT_RECENT_PAGE_SIZE,
    DEVELOPER_TOKEN_ENV_VAR,
    RECENT_TRACKS_PATH,
    USER_TOKEN_ENV_VAR,
    ReplaySettings,
    load_settings,
    resolve_developer_token,
    web_bind_address,
)


_ENV_VARS = (
    DEVELOPER_TOKEN_ENV_VAR,
    USER_TOKEN_ENV_VAR,
    "APPLE_MUSIC_API_BASE_URL",
    "APPLE_MUSIC_TIMEOUT_SECONDS",
    "REPLAY_RECENT_PAGE_SIZE",
    "REPLAY_RECENT_MAX_ITEMS",
    "REPLAY_ARTWORK_SIZE",
    "MUSICKIT_SDK",
    "MUSICKIT_APP_NAME",
    "MUSICKIT_APP_BUILD",
    "MUSICKIT_RECOVERY_DELAYS",
    "MUSICKIT_AUTHORIZE_TIMEOUT_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfigConstants:
    """Tests for configuration constants."""

    def test_recent_tracks_limits(self):
        """The recently-played endpoint serves 10 per page, 50 in total."""
        assert DEFAULT_RECENT_PAGE_SIZE == 10
        assert DEFAULT_RECENT_MAX_ITEMS == 50

    def test_recent_tracks_path(self):
        assert RECENT_TRACKS_PATH == "/v1/me/recent/played/tracks"


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults(self, clean_env):
        settings = load_settings()

        assert settings == ReplaySettings()
        assert settings.sdk == "bridge"
        assert settings.recovery_delays == DEFAULT_RECOVERY_DELAYS
        assert settings.developer_token is None

    def test_reads_environment(self, clean_env):
        clean_env.setenv("APPLE_MUSIC_API_BASE_URL", "https://proxy.test/")
        clean_env.setenv("REPLAY_RECENT_MAX_ITEMS", "25")
        clean_env.setenv("MUSICKIT_SDK", "STATIC")
        clean_env.setenv("MUSICKIT_RECOVERY_DELAYS", "0, 0.5, 2")
        clean_env.setenv(USER_TOKEN_ENV_VAR, " user ")

        settings = load_settings()

        assert settings.api_base_url == "https://proxy.test"
        assert settings.recent_max_items == 25
        assert settings.sdk == "static"
        assert settings.recovery_delays == (0.0, 0.5, 2.0)
        assert settings.music_user_token == "user"

    @pytest.mark.parametrize("raw", ["abc", "0", "-3", ""])
    def test_invalid_numbers_fall_back_to_default(self, clean_env, raw):
        clean_env.setenv("REPLAY_RECENT_PAGE_SIZE", raw)
        clean_env.setenv("APPLE_MUSIC_TIMEOUT_SECONDS", raw)

        settings = load_settings()

        assert settings.recent_page_size == DEFAULT_RECENT_PAGE_SIZE
        assert settings.timeout_seconds == ReplaySettings().timeout_seconds

    @pytest.mark.parametrize("raw", ["x,1", "-1", " , "])
    def test_invalid_recovery_delays_fall_back_to_default(self, clean_env, raw):
        clean_env.setenv("MUSICKIT_RECOVERY_DELAYS", raw)

        assert load_settings().recovery_delays == DEFAULT_RECOVERY_DELAYS

    def test_unknown_sdk_raises(self, clean_env):
        clean_env.setenv("MUSICKIT_SDK", "native")

        with pytest.raises(ValueError, match="native"):
            load_settings()


class TestResolveDeveloperToken:
    """Tests for resolve_developer_token()."""

    def test_explicit_token_wins(self, clean_env):
        clean_env.setenv(DEVELOPER_TOKEN_ENV_VAR, "from-env")
        assert resolve_developer_token("  explicit ") == "explicit"

    def test_falls_back_to_environment(self, clean_env):
        clean_env.setenv(DEVELOPER_TOKEN_ENV_VAR, "from-env")
        assert resolve_developer_token(None) == "from-env"
        assert resolve_developer_token("   ") == "from-env"

    def test_empty_when_unset(self, clean_env):
        assert resolve_developer_token() == ""


def test_web_bind_address_defaults(monkeypatch):
    monkeypatch.delenv("REPLAY_WEB_HOST", raising=False)
    monkeypatch.delenv("REPLAY_WEB_PORT", raising=False)

    assert web_bind_address() == ("127.0.0.1", 8000)


def test_web_bind_address_from_environment(monkeypatch):
    monkeypatch.setenv("REPLAY_WEB_HOST", "0.0.0.0")
    monkeypatch.setenv("REPLAY_WEB_PORT", "9100")

    assert web_bind_address() == ("0.0.0.0", 9100)
