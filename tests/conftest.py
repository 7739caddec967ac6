"""
Shared fixtures for music-replay tests.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from unittest.mock import AsyncMock

from replay_platform.catalog_client import AppleMusicClient
from replay_platform.facade import ReplayFacade
from replay_platform.runtime.config import ReplaySettings
from replay_platform.runtime.musickit import StaticTokenMusicKit
from replay_platform.sdk_adapter import MusicKitAdapter


DEVELOPER_TOKEN = "dev-token"
MUSIC_USER_TOKEN = "user-token"


@pytest.fixture
def no_sleep():
    """AsyncMock stand-in for ``asyncio.sleep``; inspect ``await_args_list`` for delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def settings():
    """Settings with the static SDK and small, predictable limits."""
    return ReplaySettings(
        api_base_url="https://api.test",
        sdk="static",
        app_name="Music Replay Tests",
        app_build="0.0.1",
        recent_page_size=10,
        recent_max_items=50,
        artwork_size=100,
        recovery_delays=(0.0, 1.0),
        developer_token=DEVELOPER_TOKEN,
        music_user_token=MUSIC_USER_TOKEN,
    )


@pytest.fixture
def make_resource():
    """Build a raw Apple Music resource dict.

    Usage:
        make_resource("Song A", artistName="Artist", playCount=3)
    """
    def _make(name=None, resource_id="1", resource_type="songs", **attributes):
        attrs = dict(attributes)
        if name is not None:
            attrs["name"] = name
        return {
            "id": resource_id,
            "type": resource_type,
            "attributes": attrs,
        }
    return _make


@pytest.fixture
def make_tracks(make_resource):
    """Build ``n`` raw recently-played tracks named ``Track 1`` .. ``Track n``."""
    def _make(n: int):
        return [
            make_resource(
                f"Track {i}",
                resource_id=f"t{i}",
                artistName=f"Artist {i}",
                albumName=f"Album {i}",
                durationInMillis=180000 + i,
            )
            for i in range(1, n + 1)
        ]
    return _make


@pytest.fixture
def summary_payload(make_resource):
    """A ``/v1/me/music-summaries`` response with one item per view."""
    return {
        "data": [
            {
                "id": "2025",
                "type": "music-summaries",
                "attributes": {"year": 2025},
                "views": {
                    "top-artists": {
                        "data": [
                            make_resource(
                                "Artist A",
                                resource_id="a1",
                                resource_type="artists",
                                genreNames=["Pop"],
                                artwork={"url": "https://img.test/{w}x{h}bb.jpg"},
                            )
                        ]
                    },
                    "top-albums": {
                        "data": [
                            make_resource(
                                "Album A",
                                resource_id="al1",
                                resource_type="albums",
                                artistName="Artist A",
                                playCount=42,
                            )
                        ]
                    },
                    "top-songs": {
                        "data": [
                            make_resource(
                                "Song A",
                                resource_id="s1",
                                artistName="Artist A",
                                albumName="Album A",
                                playCount=17,
                                durationInMillis=200000,
                            )
                        ]
                    },
                },
            }
        ]
    }


@pytest.fixture
def catalog_transport():
    """Build an ``httpx.MockTransport`` serving the two Apple Music endpoints.

    The recently-played endpoint honours ``limit``/``offset`` over ``tracks``.
    ``fail_at_offset`` answers that offset with ``fail_status``. Every request
    is appended to ``transport.requests``.

    Usage:
        transport = catalog_transport(summary=payload, tracks=make_tracks(23))
    """
    def _make(summary=None, tracks=(), fail_at_offset=None, fail_status=500, fail_body=None):
        requests = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            url = urlparse(str(request.url))
            query = parse_qs(url.query)
            if url.path == "/v1/me/music-summaries":
                return httpx.Response(200, json=summary or {"data": []})
            if url.path == "/v1/me/recent/played/tracks":
                limit = int(query["limit"][0])
                offset = int(query["offset"][0])
                if offset == fail_at_offset:
                    body = fail_body or {"errors": [{"status": str(fail_status), "title": "Upstream failure"}]}
                    return httpx.Response(fail_status, json=body)
                return httpx.Response(200, json={"data": list(tracks[offset:offset + limit])})
            return httpx.Response(404, json={"errors": [{"title": "Not Found"}]})

        transport = httpx.MockTransport(_handler)
        transport.requests = requests
        return transport
    return _make


@pytest.fixture
def client_factory(settings):
    """Return a factory that builds ``AppleMusicClient`` over a mock transport."""
    def _make(transport: httpx.MockTransport):
        def _factory(developer_token: str, music_user_token: str) -> AppleMusicClient:
            return AppleMusicClient(
                developer_token=developer_token,
                music_user_token=music_user_token,
                base_url=settings.api_base_url,
                http_client=httpx.AsyncClient(transport=transport),
            )
        return _factory
    return _make


@pytest.fixture
def make_static_facade(settings, client_factory, no_sleep):
    """Build a static-SDK ``ReplayFacade`` whose catalog calls hit ``transport``."""
    def _make(transport: httpx.MockTransport, music_user_token=MUSIC_USER_TOKEN):
        sdk = StaticTokenMusicKit(music_user_token=music_user_token)
        return ReplayFacade(
            sdk_adapter=MusicKitAdapter(sdk),
            settings=settings,
            client_factory=client_factory(transport),
            sleep=no_sleep,
        )
    return _make
