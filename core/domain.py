"""Core-native domain models for session, authorization and pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import AuthorizationError


@dataclass(frozen=True, slots=True)
class AppMetadata:
    """Application identity passed to the SDK at configure time."""

    name: str
    build: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "build": self.build}


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Immutable view of SDK readiness, configuration and authorization."""

    sdk_ready: bool = False
    configured: bool = False
    authorized: bool = False
    developer_token: str = field(default="", repr=False)
    music_user_token: str = field(default="", repr=False)
    sdk_handle: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Public shape; credentials are reduced to presence flags."""
        return {
            "sdk_ready": self.sdk_ready,
            "configured": self.configured,
            "authorized": self.authorized,
            "has_developer_token": bool(self.developer_token),
            "has_music_user_token": bool(self.music_user_token),
        }


class AuthPhase(str, Enum):
    IDLE = "idle"
    CONFIGURING = "configuring"
    CONFIGURED = "configured"
    AUTHORIZING = "authorizing"
    AUTHORIZED = "authorized"
    FAILED = "failed"


class AuthorizationResolution(str, Enum):
    DIRECT = "direct"
    RECOVERED_VIA_SIDE_CHANNEL = "recovered_via_side_channel"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AuthorizationOutcome:
    """Tagged result of one authorization attempt.

    ``error`` is set for both ``RECOVERED_VIA_SIDE_CHANNEL`` (the error the
    SDK reported before the token turned up) and ``FAILED``.
    """

    resolution: AuthorizationResolution
    music_user_token: str = field(default="", repr=False)
    error: AuthorizationError | None = None
    side_channel_reads: int = 0

    @property
    def succeeded(self) -> bool:
        return self.resolution is not AuthorizationResolution.FAILED


@dataclass(frozen=True, slots=True)
class FetchPage:
    """One page of raw API results."""

    items: tuple[Any, ...]
    has_more: bool

    @classmethod
    def from_items(cls, items: list[Any], *, limit: int) -> "FetchPage":
        return cls(items=tuple(items), has_more=len(items) >= limit)


@dataclass(frozen=True, slots=True)
class AggregatedResult:
    """Items gathered by one aggregation, in fetch order."""

    items: tuple[Any, ...] = ()
    requests_made: int = 0
    truncated: bool = False
    cancelled: bool = False

    def __len__(self) -> int:
        return len(self.items)
