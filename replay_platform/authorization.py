"""Configure/authorize phase machine over the session state and MusicKit port."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from core.domain import AppMetadata, AuthorizationOutcome, AuthorizationResolution, AuthPhase, SessionSnapshot
from core.errors import AuthorizationCategory, AuthorizationError, ConfigurationError
from core.ports import MusicKitPort
from core.service import DEFAULT_RECOVERY_DELAYS, Sleep, resolve_authorization

from .session_state_machine import SessionState

logger = logging.getLogger(__name__)


class AuthorizationOrchestrator:
    """Drives ``IDLE -> CONFIGURING -> CONFIGURED -> AUTHORIZING -> AUTHORIZED``.

    ``FAILED`` is entered from either transient phase and only lasts until the
    next attempt, which starts again from the last stable phase (derived from
    the session). Nothing is committed to the session on failure.
    """

    def __init__(
        self,
        *,
        session: SessionState,
        sdk: MusicKitPort,
        app: AppMetadata,
        recovery_delays: Sequence[float] = DEFAULT_RECOVERY_DELAYS,
        sleep: Sleep = asyncio.sleep,
    ):
        self.session = session
        self.sdk = sdk
        self.app = app
        self.recovery_delays = tuple(recovery_delays)
        self._sleep = sleep
        self._phase = AuthPhase.IDLE
        self.last_error: Exception | None = None
        self.last_outcome: AuthorizationOutcome | None = None

    @property
    def phase(self) -> AuthPhase:
        return self._phase

    @property
    def stable_phase(self) -> AuthPhase:
        snapshot = self.session.observe()
        if snapshot.authorized:
            return AuthPhase.AUTHORIZED
        if snapshot.configured:
            return AuthPhase.CONFIGURED
        return AuthPhase.IDLE

    def _fail(self, error: Exception) -> None:
        self.last_error = error
        self._phase = AuthPhase.FAILED

    async def configure(self, developer_token: str) -> SessionSnapshot:
        """Configure MusicKit and commit the handle and token to the session."""
        token = (developer_token or "").strip()
        if not token:
            raise ConfigurationError("A developer token is required.", category="missing_credential")

        snapshot = self.session.observe()
        if snapshot.configured and snapshot.developer_token == token:
            return snapshot
        if snapshot.authorized:
            raise ConfigurationError(
                "MusicKit is already authorized with a different developer token.",
                category="already_authorized",
            )
        if not snapshot.sdk_ready:
            raise ConfigurationError("MusicKit has not finished loading.", category="sdk_not_ready")

        self._phase = AuthPhase.CONFIGURING
        try:
            handle = await self.sdk.configure(token, self.app)
        except ConfigurationError as e:
            logger.warning("MusicKit configuration failed: %s", e)
            self._fail(e)
            raise
        finally:
            if self._phase is AuthPhase.CONFIGURING:
                self._phase = self.stable_phase

        snapshot = self.session.mark_configured(token, handle)
        self._phase = AuthPhase.CONFIGURED
        self.last_error = None
        return snapshot

    async def authorize(self) -> AuthorizationOutcome:
        """Obtain a music user token, recovering through the side channel if needed.

        Raises:
            AuthorizationError: When not configured, or when consent genuinely
                failed. The session stays configured in both cases.
        """
        snapshot = self.session.observe()
        if snapshot.authorized:
            return AuthorizationOutcome(
                resolution=AuthorizationResolution.DIRECT,
                music_user_token=snapshot.music_user_token,
            )
        if not snapshot.configured:
            raise AuthorizationError(
                "MusicKit must be configured before authorizing.",
                category=AuthorizationCategory.NOT_CONFIGURED,
            )

        self._phase = AuthPhase.AUTHORIZING
        try:
            outcome = await resolve_authorization(
                self.sdk,
                snapshot.sdk_handle,
                recovery_delays=self.recovery_delays,
                sleep=self._sleep,
            )
            self.last_outcome = outcome
            if not outcome.succeeded:
                logger.warning("MusicKit authorization failed: %s", outcome.error)
                self._fail(outcome.error)
                raise outcome.error
            self.session.mark_authorized(outcome.music_user_token)
        finally:
            if self._phase is AuthPhase.AUTHORIZING:
                self._phase = self.stable_phase

        self._phase = AuthPhase.AUTHORIZED
        self.last_error = None
        logger.info("Authorization resolved: %s", outcome.resolution.value)
        return outcome
