"""Core service ports for the MusicKit SDK and the paged catalog API."""

from __future__ import annotations

from typing import Any, Protocol

from .domain import AppMetadata


class MusicKitPort(Protocol):
    """Narrow capability set over the MusicKit SDK.

    Implementations pass calls through to the SDK and translate its errors
    into ``ConfigurationError`` / ``AuthorizationError``. Retry and recovery
    policy belongs to the caller.
    """

    @property
    def is_ready(self) -> bool:
        ...

    async def load(self) -> None:
        ...

    async def wait_until_ready(self) -> None:
        ...

    async def configure(self, developer_token: str, app: AppMetadata) -> Any:
        ...

    async def authorize(self, handle: Any) -> str:
        ...

    async def current_user_token(self, handle: Any) -> str | None:
        ...


class PageFetcherPort(Protocol):
    """Port for fetching one offset-based page of a catalog resource."""

    async def fetch_page(self, resource_path: str, *, limit: int, offset: int) -> list[dict]:
        ...
