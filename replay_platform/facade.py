"""Platform orchestration facade over session, authorization and catalog fetches."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from contracts.v1.adapters import (
    adapt_music_summary,
    aggregation_meta,
    normalize_recent_tracks,
    snapshot_to_contract,
)
from contracts.v1.schemas import (
    RecentTracksResponse,
    ReplayDataResponse,
    ReplaySummary,
    SessionSnapshotContract,
)
from core.domain import AggregatedResult, AppMetadata, AuthorizationOutcome, AuthPhase, SessionSnapshot
from core.pagination import fetch_all
from core.service import Sleep

from .authorization import AuthorizationOrchestrator
from .catalog_client import AppleMusicClient
from .runtime.config import RECENT_TRACKS_PATH, ReplaySettings, load_settings
from .runtime.musickit import create_sdk
from .sdk_adapter import MusicKitAdapter
from .session_state_machine import SessionState, require_authorized

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str], AppleMusicClient]


class ReplayFacade:
    """Caller-facing surface: observe, configure, authorize, fetch.

    One facade owns one ``SessionState``. Only one authorization or fetch is
    expected in flight at a time.
    """

    def __init__(
        self,
        *,
        sdk_adapter: MusicKitAdapter,
        settings: ReplaySettings,
        session: SessionState | None = None,
        client_factory: ClientFactory | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings = settings
        self.sdk_adapter = sdk_adapter
        self.session = session or SessionState()
        self.orchestrator = AuthorizationOrchestrator(
            session=self.session,
            sdk=sdk_adapter,
            app=AppMetadata(name=settings.app_name, build=settings.app_build),
            recovery_delays=settings.recovery_delays,
            sleep=sleep,
        )
        self._client_factory = client_factory or self._default_client

    def _default_client(self, developer_token: str, music_user_token: str) -> AppleMusicClient:
        return AppleMusicClient(
            developer_token=developer_token,
            music_user_token=music_user_token,
            base_url=self.settings.api_base_url,
            timeout_seconds=self.settings.timeout_seconds,
        )

    # --- Session ---

    def observe(self) -> SessionSnapshot:
        return self.session.observe()

    @property
    def phase(self) -> AuthPhase:
        return self.orchestrator.phase

    def session_contract(self) -> SessionSnapshotContract:
        return snapshot_to_contract(self.observe(), phase=self.phase.value)

    async def load_sdk(self) -> SessionSnapshot:
        """Wait for the SDK to load and mark the session ready."""
        await self.sdk_adapter.load()
        return self.session.mark_sdk_ready()

    async def configure_music_kit(self, developer_token: str | None = None) -> SessionSnapshot:
        """Configure MusicKit; ``None`` falls back to the configured developer token."""
        if developer_token is None:
            developer_token = self.settings.developer_token or ""
        return await self.orchestrator.configure(developer_token)

    async def authorize(self) -> AuthorizationOutcome:
        return await self.orchestrator.authorize()

    # --- Data ---

    def _open_client(self) -> AppleMusicClient:
        snapshot = require_authorized(self.observe())
        return self._client_factory(snapshot.developer_token, snapshot.music_user_token)

    async def _fetch_recent(
        self,
        client: AppleMusicClient,
        *,
        max_items: int | None,
        cancel_event: asyncio.Event | None,
        partial_on_cancel: bool,
    ) -> AggregatedResult:
        return await fetch_all(
            client,
            RECENT_TRACKS_PATH,
            page_size=self.settings.recent_page_size,
            max_items=max_items or self.settings.recent_max_items,
            cancel_event=cancel_event,
            partial_on_cancel=partial_on_cancel,
        )

    async def get_music_summary(self) -> ReplaySummary:
        async with self._open_client() as client:
            raw = await client.get_music_summary()
        return adapt_music_summary(raw, artwork_size=self.settings.artwork_size)

    async def get_recent_tracks(
        self,
        *,
        max_items: int | None = None,
        cancel_event: asyncio.Event | None = None,
        partial_on_cancel: bool = False,
    ) -> RecentTracksResponse:
        """Aggregate the recently-played tracks and normalize them."""
        async with self._open_client() as client:
            started = time.perf_counter()
            result = await self._fetch_recent(
                client,
                max_items=max_items,
                cancel_event=cancel_event,
                partial_on_cancel=partial_on_cancel,
            )
            elapsed = time.perf_counter() - started

        return RecentTracksResponse(
            tracks=normalize_recent_tracks(result.items, artwork_size=self.settings.artwork_size),
            meta=aggregation_meta(result, timings={"recent_tracks_seconds": round(elapsed, 3)}),
        )

    async def get_replay_data(
        self,
        *,
        max_items: int | None = None,
        cancel_event: asyncio.Event | None = None,
        partial_on_cancel: bool = False,
    ) -> ReplayDataResponse:
        """Fetch the Replay summary, then the recent tracks, on one client."""
        async with self._open_client() as client:
            started = time.perf_counter()
            raw_summary = await client.get_music_summary()
            summary_elapsed = time.perf_counter() - started

            started = time.perf_counter()
            result = await self._fetch_recent(
                client,
                max_items=max_items,
                cancel_event=cancel_event,
                partial_on_cancel=partial_on_cancel,
            )
            recent_elapsed = time.perf_counter() - started

        summary = adapt_music_summary(raw_summary, artwork_size=self.settings.artwork_size)
        tracks = normalize_recent_tracks(result.items, artwork_size=self.settings.artwork_size)
        logger.info(
            "Replay data ready: %d artists, %d albums, %d songs, %d recent tracks.",
            len(summary.top_artists), len(summary.top_albums), len(summary.top_songs), len(tracks),
        )
        return ReplayDataResponse(
            summary=summary,
            recent_tracks=tracks,
            meta=aggregation_meta(
                result,
                timings={
                    "summary_seconds": round(summary_elapsed, 3),
                    "recent_tracks_seconds": round(recent_elapsed, 3),
                },
            ),
        )


def create_default_facade(settings: ReplaySettings | None = None) -> ReplayFacade:
    """Build a facade wired to the SDK named in ``settings``."""
    settings = settings or load_settings()
    sdk = create_sdk(
        settings.sdk,
        music_user_token=settings.music_user_token,
        authorize_timeout_seconds=settings.authorize_timeout_seconds,
    )
    return ReplayFacade(sdk_adapter=MusicKitAdapter(sdk), settings=settings)
