"""
Headless MusicKit implementation backed by a pre-issued music user token.

Used by the CLI and scripts, where the consent exchange already happened in
a browser and the resulting token is passed in directly.
"""

import logging
from typing import Optional

from .base import (
    AUTHORIZATION_ERROR,
    CONFIGURATION_ERROR,
    MusicKitError,
    MusicKitInstance,
    MusicKitSdk,
)

logger = logging.getLogger(__name__)


class StaticTokenInstance(MusicKitInstance):
    def __init__(self, developer_token: str, app: dict[str, str], user_token: Optional[str]):
        super().__init__(developer_token, app)
        self._offered_token = user_token
        self._music_user_token: Optional[str] = None

    @property
    def music_user_token(self) -> Optional[str]:
        return self._music_user_token

    async def authorize(self) -> str:
        if not self._offered_token:
            raise MusicKitError(AUTHORIZATION_ERROR, "no music user token was supplied")
        self._music_user_token = self._offered_token
        return self._music_user_token


class StaticTokenMusicKit(MusicKitSdk):
    """MusicKitSdk whose consent step returns a token supplied up front."""

    def __init__(self, music_user_token: Optional[str] = None):
        self._music_user_token = (music_user_token or "").strip() or None
        self._instance: Optional[StaticTokenInstance] = None

    async def load(self) -> None:
        logger.debug("Static MusicKit loaded.")

    async def configure(self, developer_token: str, app: dict[str, str]) -> MusicKitInstance:
        if not developer_token:
            raise MusicKitError(CONFIGURATION_ERROR, "developer token is required")
        self._instance = StaticTokenInstance(developer_token, app, self._music_user_token)
        return self._instance

    def get_instance(self) -> Optional[MusicKitInstance]:
        return self._instance
