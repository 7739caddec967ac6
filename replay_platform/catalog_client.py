"""Apple Music API client adapter with timeout and error mapping."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.errors import FetchError, SessionStateError

from .runtime.config import (
    APPLE_MUSIC_API_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    MUSIC_SUMMARIES_PATH,
    SUMMARY_VIEWS,
    SUMMARY_YEAR_FILTER,
)

logger = logging.getLogger(__name__)


class AppleMusicClient:
    """HTTP adapter for the user-scoped Apple Music API.

    Every request carries both the developer token and the music user token.
    Failures are raised as ``FetchError``; nothing is retried here.
    """

    def __init__(
        self,
        *,
        developer_token: str,
        music_user_token: str,
        base_url: str = APPLE_MUSIC_API_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not developer_token or not music_user_token:
            raise SessionStateError("Apple Music requests need both a developer and a music user token")
        self.base_url = base_url.rstrip("/")
        self._developer_token = developer_token
        self._music_user_token = music_user_token
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def __aenter__(self) -> "AppleMusicClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._developer_token}",
            "Music-User-Token": self._music_user_token,
        }

    async def get_music_summary(self) -> dict[str, Any]:
        """Call ``GET /v1/me/music-summaries`` for the latest Replay year."""
        return await self._request_json(
            "GET",
            MUSIC_SUMMARIES_PATH,
            params={"filter[year]": SUMMARY_YEAR_FILTER, "views": SUMMARY_VIEWS},
        )

    async def fetch_page(self, resource_path: str, *, limit: int, offset: int) -> list[dict]:
        """Fetch one ``limit``/``offset`` page and return its ``data`` items."""
        payload = await self._request_json(
            "GET",
            resource_path,
            params={"limit": limit, "offset": offset},
        )
        items = payload.get("data", [])
        if not isinstance(items, list):
            raise FetchError(f"unexpected 'data' in response for {resource_path}")
        return items

    async def _request_json(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON object."""
        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, params=params, headers=self._headers())
        except httpx.TimeoutException as e:
            raise FetchError(f"request to {path} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"request to {path} failed: {e}") from e

        if not response.is_success:
            detail = self._read_http_error_detail(response)
            logger.warning("Apple Music %s %s returned %d: %s", method, path, response.status_code, detail)
            raise FetchError(
                detail,
                status_code=response.status_code,
                retry_after=self._retry_after(response),
            )

        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"Apple Music returned invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise FetchError("Apple Music returned a non-object JSON payload")
        return payload

    @staticmethod
    def _read_http_error_detail(response: httpx.Response) -> str:
        body = response.text
        if not body:
            return response.reason_phrase or "HTTP error"
        try:
            payload = response.json()
        except ValueError:
            return body
        errors = payload.get("errors") if isinstance(payload, dict) else None
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            first = errors[0]
            return str(first.get("detail") or first.get("title") or body)
        return body

    @staticmethod
    def _retry_after(response: httpx.Response) -> float | None:
        raw = response.headers.get("Retry-After")
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError:
            return None
