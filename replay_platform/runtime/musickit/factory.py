"""
Factory for creating MusicKit SDK instances by name.
"""

from typing import Optional

from .base import MusicKitSdk


# Supported SDK names (lowercase).
SUPPORTED_SDKS = ("bridge", "static")


def create_sdk(
    kind: str,
    *,
    music_user_token: Optional[str] = None,
    authorize_timeout_seconds: float = 120.0,
) -> MusicKitSdk:
    """Create a ``MusicKitSdk`` for the given kind.

    Args:
        kind:                      ``"bridge"`` or ``"static"`` (case-insensitive).
        music_user_token:          Pre-issued token for the static SDK.
        authorize_timeout_seconds: How long the bridge waits for consent.

    Raises:
        ValueError: If the kind is not recognised.
    """
    kind = kind.lower().strip()

    if kind == "bridge":
        from .bridge import BridgeMusicKit
        return BridgeMusicKit(authorize_timeout_seconds=authorize_timeout_seconds)

    if kind == "static":
        from .static import StaticTokenMusicKit
        return StaticTokenMusicKit(music_user_token=music_user_token)

    valid = ", ".join(SUPPORTED_SDKS)
    raise ValueError(
        f"Unknown MusicKit SDK '{kind}'. Supported SDKs: {valid}"
    )
