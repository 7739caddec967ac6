"""
Browser-bridged MusicKit implementation.

MusicKit JS only runs in a browser. The page loads it, runs the consent
exchange and reports each event back to the web API, which forwards it here:

* ``notify_loaded`` / ``notify_load_failed`` for the ``musickitloaded`` event,
* ``deliver_authorization`` with either a music user token or an error code.

A token delivered after an error report is not lost: it lands on the
instance's ``music_user_token`` field, where a side-channel read finds it.
An error reported while no authorize call is waiting is raised by the next
one, unless a token has arrived in the meantime. A later ``notify_loaded``
clears an earlier load failure so the page can retry.
"""

import asyncio
import logging
from typing import Optional

from .base import (
    CONFIGURATION_ERROR,
    USER_INTERACTION_REQUIRED,
    MusicKitError,
    MusicKitInstance,
    MusicKitSdk,
)

logger = logging.getLogger(__name__)


class BridgeMusicKitInstance(MusicKitInstance):
    def __init__(self, developer_token: str, app: dict[str, str], *, authorize_timeout_seconds: float):
        super().__init__(developer_token, app)
        self.authorize_timeout_seconds = authorize_timeout_seconds
        self._music_user_token: Optional[str] = None
        self._pending: Optional[asyncio.Future] = None
        self._reported_error: Optional[MusicKitError] = None

    @property
    def music_user_token(self) -> Optional[str]:
        return self._music_user_token

    @property
    def awaiting_consent(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def authorize(self) -> str:
        if self._music_user_token:
            return self._music_user_token
        if self._reported_error is not None:
            error, self._reported_error = self._reported_error, None
            raise error

        self._pending = asyncio.get_running_loop().create_future()
        try:
            return await asyncio.wait_for(self._pending, timeout=self.authorize_timeout_seconds)
        except asyncio.TimeoutError:
            raise MusicKitError(
                USER_INTERACTION_REQUIRED,
                f"no consent reported within {self.authorize_timeout_seconds:g}s",
            ) from None
        finally:
            self._pending = None

    def deliver_token(self, token: str) -> None:
        self._music_user_token = token
        self._reported_error = None
        if self.awaiting_consent:
            self._pending.set_result(token)

    def deliver_error(self, code: str, message: str = "") -> None:
        error = MusicKitError(code, message)
        if self.awaiting_consent:
            self._pending.set_exception(error)
        else:
            logger.debug("Holding MusicKit error %s reported outside an authorize call.", error.code)
            self._reported_error = error


class BridgeMusicKit(MusicKitSdk):
    """MusicKitSdk driven by events reported from a browser page."""

    def __init__(self, *, authorize_timeout_seconds: float = 120.0):
        self.authorize_timeout_seconds = authorize_timeout_seconds
        self._loaded = asyncio.Event()
        self._load_error: Optional[MusicKitError] = None
        self._instance: Optional[BridgeMusicKitInstance] = None

    def notify_loaded(self) -> None:
        self._load_error = None
        self._loaded.set()

    def notify_load_failed(self, code: str, message: str = "") -> None:
        self._load_error = MusicKitError(code, message)
        self._loaded.set()

    async def load(self) -> None:
        await self._loaded.wait()
        if self._load_error is not None:
            raise self._load_error

    async def configure(self, developer_token: str, app: dict[str, str]) -> MusicKitInstance:
        if not developer_token:
            raise MusicKitError(CONFIGURATION_ERROR, "developer token is required")
        if self._instance is None or self._instance.developer_token != developer_token:
            self._instance = BridgeMusicKitInstance(
                developer_token,
                app,
                authorize_timeout_seconds=self.authorize_timeout_seconds,
            )
        return self._instance

    def get_instance(self) -> Optional[MusicKitInstance]:
        return self._instance

    def deliver_authorization(
        self,
        *,
        music_user_token: Optional[str] = None,
        error_code: Optional[str] = None,
        message: str = "",
    ) -> None:
        """Forward the browser's authorize result to the configured instance.

        A report may carry both an error code and a token; the error is
        delivered first, then the token is stored.
        """
        if self._instance is None:
            raise MusicKitError(CONFIGURATION_ERROR, "MusicKit has not been configured")
        if error_code:
            self._instance.deliver_error(error_code, message)
        if music_user_token:
            self._instance.deliver_token(music_user_token)
