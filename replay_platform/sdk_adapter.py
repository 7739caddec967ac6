"""Pass-through adapter from ``MusicKitSdk`` to the core ``MusicKitPort``."""

from __future__ import annotations

import asyncio
import logging

from core.domain import AppMetadata
from core.errors import AuthorizationCategory, AuthorizationError, ConfigurationError

from .runtime.musickit.base import (
    ACCESS_DENIED,
    CONFIGURATION_ERROR,
    TOKEN_EXPIRED,
    UNAUTHORIZED_ERROR,
    USER_INTERACTION_REQUIRED,
    MusicKitError,
    MusicKitInstance,
    MusicKitSdk,
)

logger = logging.getLogger(__name__)

_ACCESS_DENIED_CODES = {ACCESS_DENIED, USER_INTERACTION_REQUIRED}
_INVALID_CREDENTIAL_CODES = {CONFIGURATION_ERROR, TOKEN_EXPIRED, UNAUTHORIZED_ERROR}


def authorization_category(code: str | None) -> AuthorizationCategory:
    """Map a MusicKit error code onto an authorization category."""
    code = (code or "").upper()
    if code in _ACCESS_DENIED_CODES:
        return AuthorizationCategory.ACCESS_DENIED
    if code in _INVALID_CREDENTIAL_CODES:
        return AuthorizationCategory.INVALID_CREDENTIAL
    return AuthorizationCategory.UNKNOWN


def _authorization_error(e: MusicKitError) -> AuthorizationError:
    return AuthorizationError(e.message, category=authorization_category(e.code), sdk_code=e.code)


class MusicKitAdapter:
    """Narrow MusicKit surface: load, configure, authorize, side-channel read.

    Errors are translated, never retried or reinterpreted.
    """

    def __init__(self, sdk: MusicKitSdk):
        self.sdk = sdk
        self._ready = asyncio.Event()

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    async def load(self) -> None:
        """Load the SDK and fire the one-time readiness event."""
        if self.is_ready:
            return
        try:
            await self.sdk.load()
        except MusicKitError as e:
            raise ConfigurationError(
                f"MusicKit failed to load: {e.message}",
                category="sdk_load",
            ) from e
        self._ready.set()

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    async def configure(self, developer_token: str, app: AppMetadata) -> MusicKitInstance:
        try:
            return await self.sdk.configure(developer_token, app.to_dict())
        except MusicKitError as e:
            category = "invalid_credential" if e.code in _INVALID_CREDENTIAL_CODES else "configuration"
            raise ConfigurationError(
                f"MusicKit configure failed ({e.code}): {e.message}",
                category=category,
            ) from e

    async def authorize(self, handle: MusicKitInstance) -> str:
        try:
            return await handle.authorize()
        except MusicKitError as e:
            raise _authorization_error(e) from e

    async def current_user_token(self, handle: MusicKitInstance) -> str | None:
        try:
            token = await handle.read_music_user_token()
        except MusicKitError as e:
            raise _authorization_error(e) from e
        return token or None
