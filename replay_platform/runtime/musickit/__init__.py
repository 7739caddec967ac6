"""
MusicKit SDK abstraction layer.

Usage::

    from replay_platform.runtime.musickit import create_sdk

    sdk = create_sdk("static", music_user_token="...")
    await sdk.load()
    instance = await sdk.configure(developer_token, {"name": "Music Replay", "build": "1.0.0"})
"""

from .base import MusicKitError, MusicKitInstance, MusicKitSdk
from .bridge import BridgeMusicKit
from .factory import SUPPORTED_SDKS, create_sdk
from .static import StaticTokenMusicKit

__all__ = [
    "MusicKitError",
    "MusicKitInstance",
    "MusicKitSdk",
    "BridgeMusicKit",
    "StaticTokenMusicKit",
    "SUPPORTED_SDKS",
    "create_sdk",
]
