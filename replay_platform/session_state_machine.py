"""Platform-owned session state with monotonic transitions."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from core.domain import SessionSnapshot
from core.errors import SessionStateError

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


def check_invariants(snapshot: SessionSnapshot) -> None:
    """Raise ``SessionStateError`` when a snapshot breaks the session invariants."""
    if snapshot.configured and not snapshot.sdk_ready:
        raise SessionStateError("configured session requires a ready SDK")
    if snapshot.authorized and not snapshot.configured:
        raise SessionStateError("authorized session requires configuration")
    if snapshot.music_user_token and not snapshot.authorized:
        raise SessionStateError("music user token present on an unauthorized session")
    if snapshot.configured and not snapshot.developer_token:
        raise SessionStateError("configured session requires a developer token")


def is_monotonic(previous: SessionSnapshot, current: SessionSnapshot) -> bool:
    """Return True when no flag went from True back to False."""
    return all(
        getattr(current, flag) or not getattr(previous, flag)
        for flag in ("sdk_ready", "configured", "authorized")
    )


class SessionState:
    """Single owner of the current ``SessionSnapshot``.

    Transitions replace the snapshot wholesale after validating it, so
    observers never see a half-applied state. One writer at a time is
    assumed; the class does not lock.
    """

    def __init__(self) -> None:
        self._snapshot = SessionSnapshot()
        self._listeners: list[Listener] = []

    def observe(self) -> SessionSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``, call it with the current snapshot, return an unsubscribe."""
        self._listeners.append(listener)
        listener(self._snapshot)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, snapshot: SessionSnapshot) -> SessionSnapshot:
        check_invariants(snapshot)
        if not is_monotonic(self._snapshot, snapshot):
            raise SessionStateError("session flags cannot be reset")
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot

    def mark_sdk_ready(self) -> SessionSnapshot:
        if self._snapshot.sdk_ready:
            return self._snapshot
        logger.info("MusicKit SDK ready.")
        return self._commit(replace(self._snapshot, sdk_ready=True))

    def mark_configured(self, developer_token: str, handle: Any) -> SessionSnapshot:
        current = self._snapshot
        if not current.sdk_ready:
            raise SessionStateError("mark_configured called before the SDK was ready")
        if not developer_token:
            raise SessionStateError("mark_configured requires a developer token")
        if current.authorized:
            raise SessionStateError("cannot reconfigure an authorized session")
        logger.info("MusicKit configured.")
        return self._commit(
            replace(current, configured=True, developer_token=developer_token, sdk_handle=handle)
        )

    def mark_authorized(self, music_user_token: str) -> SessionSnapshot:
        current = self._snapshot
        if not current.configured:
            raise SessionStateError("mark_authorized called before mark_configured")
        if not music_user_token:
            raise SessionStateError("mark_authorized requires a music user token")
        logger.info("MusicKit authorized.")
        return self._commit(replace(current, authorized=True, music_user_token=music_user_token))


def require_authorized(snapshot: SessionSnapshot) -> SessionSnapshot:
    """Return ``snapshot`` if both credentials are present, else raise."""
    if not snapshot.authorized or not snapshot.music_user_token or not snapshot.developer_token:
        raise SessionStateError("session is not authorized; call authorize() first")
    return snapshot
