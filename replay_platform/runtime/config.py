"""
Configuration constants for the music-replay system.
"""

import os
from dataclasses import dataclass

from core.service import DEFAULT_RECOVERY_DELAYS

from .musickit.factory import SUPPORTED_SDKS

APPLE_MUSIC_API_BASE_URL = "https://api.music.apple.com"

# Endpoints consumed from the Apple Music API
MUSIC_SUMMARIES_PATH = "/v1/me/music-summaries"
RECENT_TRACKS_PATH = "/v1/me/recent/played/tracks"
SUMMARY_VIEWS = "top-artists,top-albums,top-songs"
SUMMARY_YEAR_FILTER = "latest"

# The recently-played endpoint serves at most 10 items per page and stops
# answering past roughly 50 items.
DEFAULT_RECENT_PAGE_SIZE = 10
DEFAULT_RECENT_MAX_ITEMS = 50

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_ARTWORK_SIZE = 300
DEFAULT_AUTHORIZE_TIMEOUT_SECONDS = 120.0

DEFAULT_APP_NAME = "Music Replay"
DEFAULT_APP_BUILD = "1.0.0"

DEFAULT_SDK = "bridge"

DEFAULT_WEB_HOST = "127.0.0.1"
DEFAULT_WEB_PORT = 8000

DEVELOPER_TOKEN_ENV_VAR = "APPLE_MUSIC_DEVELOPER_TOKEN"
USER_TOKEN_ENV_VAR = "APPLE_MUSIC_USER_TOKEN"

_API_BASE_URL_ENV = "APPLE_MUSIC_API_BASE_URL"
_TIMEOUT_SECONDS_ENV = "APPLE_MUSIC_TIMEOUT_SECONDS"
_RECENT_PAGE_SIZE_ENV = "REPLAY_RECENT_PAGE_SIZE"
_RECENT_MAX_ITEMS_ENV = "REPLAY_RECENT_MAX_ITEMS"
_ARTWORK_SIZE_ENV = "REPLAY_ARTWORK_SIZE"
SDK_ENV_VAR = "MUSICKIT_SDK"
_APP_NAME_ENV = "MUSICKIT_APP_NAME"
_APP_BUILD_ENV = "MUSICKIT_APP_BUILD"
_RECOVERY_DELAYS_ENV = "MUSICKIT_RECOVERY_DELAYS"
_AUTHORIZE_TIMEOUT_ENV = "MUSICKIT_AUTHORIZE_TIMEOUT_SECONDS"
WEB_HOST_ENV = "REPLAY_WEB_HOST"
WEB_PORT_ENV = "REPLAY_WEB_PORT"


def _to_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _to_float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _to_delays_env(name: str, default: tuple[float, ...]) -> tuple[float, ...]:
    """Parse a comma-separated list of non-negative delays in seconds."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        delays = tuple(float(part) for part in raw.split(",") if part.strip())
    except ValueError:
        return default
    if not delays or any(d < 0 for d in delays):
        return default
    return delays


def _str_env(name: str, default: str | None = None) -> str | None:
    raw = os.environ.get(name, "").strip()
    return raw or default


@dataclass(frozen=True)
class ReplaySettings:
    api_base_url: str = APPLE_MUSIC_API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    recent_page_size: int = DEFAULT_RECENT_PAGE_SIZE
    recent_max_items: int = DEFAULT_RECENT_MAX_ITEMS
    artwork_size: int = DEFAULT_ARTWORK_SIZE
    sdk: str = DEFAULT_SDK
    app_name: str = DEFAULT_APP_NAME
    app_build: str = DEFAULT_APP_BUILD
    recovery_delays: tuple[float, ...] = DEFAULT_RECOVERY_DELAYS
    authorize_timeout_seconds: float = DEFAULT_AUTHORIZE_TIMEOUT_SECONDS
    developer_token: str | None = None
    music_user_token: str | None = None


def load_settings() -> ReplaySettings:
    """Build settings from the environment, falling back to the defaults above."""
    sdk = (_str_env(SDK_ENV_VAR, DEFAULT_SDK) or DEFAULT_SDK).lower()
    if sdk not in SUPPORTED_SDKS:
        valid = ", ".join(SUPPORTED_SDKS)
        raise ValueError(f"Unknown MusicKit SDK '{sdk}' in {SDK_ENV_VAR}. Supported: {valid}")

    return ReplaySettings(
        api_base_url=_str_env(_API_BASE_URL_ENV, APPLE_MUSIC_API_BASE_URL).rstrip("/"),
        timeout_seconds=_to_float_env(_TIMEOUT_SECONDS_ENV, DEFAULT_TIMEOUT_SECONDS),
        recent_page_size=_to_int_env(_RECENT_PAGE_SIZE_ENV, DEFAULT_RECENT_PAGE_SIZE),
        recent_max_items=_to_int_env(_RECENT_MAX_ITEMS_ENV, DEFAULT_RECENT_MAX_ITEMS),
        artwork_size=_to_int_env(_ARTWORK_SIZE_ENV, DEFAULT_ARTWORK_SIZE),
        sdk=sdk,
        app_name=_str_env(_APP_NAME_ENV, DEFAULT_APP_NAME),
        app_build=_str_env(_APP_BUILD_ENV, DEFAULT_APP_BUILD),
        recovery_delays=_to_delays_env(_RECOVERY_DELAYS_ENV, DEFAULT_RECOVERY_DELAYS),
        authorize_timeout_seconds=_to_float_env(_AUTHORIZE_TIMEOUT_ENV, DEFAULT_AUTHORIZE_TIMEOUT_SECONDS),
        developer_token=_str_env(DEVELOPER_TOKEN_ENV_VAR),
        music_user_token=_str_env(USER_TOKEN_ENV_VAR),
    )


def resolve_developer_token(explicit_token: str | None = None) -> str:
    """Get the developer token.

    Priority:
        1. ``explicit_token`` if provided (e.g. ``--developer-token`` or request body).
        2. The ``APPLE_MUSIC_DEVELOPER_TOKEN`` environment variable.

    Returns ``""`` when neither is set; configure rejects empty tokens.
    """
    if explicit_token and explicit_token.strip():
        return explicit_token.strip()
    return _str_env(DEVELOPER_TOKEN_ENV_VAR, "") or ""


def web_bind_address() -> tuple[str, int]:
    """Host and port for the web API, from ``REPLAY_WEB_HOST`` / ``REPLAY_WEB_PORT``."""
    return (
        _str_env(WEB_HOST_ENV, DEFAULT_WEB_HOST),
        _to_int_env(WEB_PORT_ENV, DEFAULT_WEB_PORT),
    )
