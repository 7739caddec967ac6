"""Tests for core.pagination sequential aggregation."""

from __future__ import annotations

import asyncio

import pytest

from core.errors import AggregationCancelledError, FetchError
from core.pagination import fetch_all


class _FakeFetcher:
    """Serves ``total`` numbered items in pages; records each call."""

    def __init__(self, total: int, *, fail_at_offset: int | None = None, page_cap: int | None = None):
        self.total = total
        self.fail_at_offset = fail_at_offset
        self.page_cap = page_cap
        self.calls: list[tuple[str, int, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_page(self, resource_path, *, limit, offset):
        self.calls.append((resource_path, limit, offset))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if offset == self.fail_at_offset:
                raise FetchError("boom", status_code=500)
            end = min(self.total, offset + limit)
            if self.page_cap is not None:
                end = min(end, offset + self.page_cap)
            return [{"id": str(i)} for i in range(offset, end)]
        finally:
            self.in_flight -= 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "total, page_size, expected_requests",
    [
        (0, 10, 1),
        (5, 10, 1),
        (10, 10, 2),
        (23, 10, 3),
        (30, 10, 4),
        (7, 3, 3),
    ],
)
async def test_requests_follow_page_arithmetic(total, page_size, expected_requests):
    fetcher = _FakeFetcher(total)

    result = await fetch_all(fetcher, "/items", page_size=page_size, max_items=1000)

    assert result.requests_made == expected_requests
    assert len(fetcher.calls) == expected_requests
    assert len(result) == total
    assert result.truncated is False


@pytest.mark.asyncio
async def test_twenty_three_tracks_use_offsets_0_10_20():
    fetcher = _FakeFetcher(23)

    result = await fetch_all(fetcher, "/v1/me/recent/played/tracks", page_size=10, max_items=50)

    assert [offset for _, _, offset in fetcher.calls] == [0, 10, 20]
    assert all(limit == 10 for _, limit, _ in fetcher.calls)
    assert [item["id"] for item in result.items] == [str(i) for i in range(23)]
    assert result.requests_made == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "max_items, expected_requests",
    [
        (10, 1),
        (15, 2),
        (20, 2),
        (50, 5),
    ],
)
async def test_stops_exactly_at_max_items(max_items, expected_requests):
    fetcher = _FakeFetcher(100)

    result = await fetch_all(fetcher, "/items", page_size=10, max_items=max_items)

    assert len(result) == max_items
    assert result.truncated is True
    assert result.requests_made == expected_requests
    assert result.items[-1] == {"id": str(max_items - 1)}


@pytest.mark.asyncio
async def test_short_page_stops_even_when_more_items_might_exist():
    fetcher = _FakeFetcher(100, page_cap=7)

    result = await fetch_all(fetcher, "/items", page_size=10, max_items=50)

    assert len(result) == 7
    assert result.requests_made == 1
    assert result.truncated is False


@pytest.mark.asyncio
@pytest.mark.parametrize("fail_at_offset", [0, 10, 20])
async def test_fetch_error_discards_partial_results(fail_at_offset):
    fetcher = _FakeFetcher(100, fail_at_offset=fail_at_offset)

    with pytest.raises(FetchError) as exc_info:
        await fetch_all(fetcher, "/items", page_size=10, max_items=50)

    assert exc_info.value.status_code == 500
    assert len(fetcher.calls) == fail_at_offset // 10 + 1


@pytest.mark.asyncio
async def test_requests_are_never_concurrent():
    fetcher = _FakeFetcher(45)

    await fetch_all(fetcher, "/items", page_size=10, max_items=50)

    assert fetcher.max_in_flight == 1


@pytest.mark.asyncio
async def test_cancel_before_first_request_raises():
    fetcher = _FakeFetcher(30)
    cancel = asyncio.Event()
    cancel.set()

    with pytest.raises(AggregationCancelledError) as exc_info:
        await fetch_all(fetcher, "/items", page_size=10, max_items=50, cancel_event=cancel)

    assert fetcher.calls == []
    assert exc_info.value.gathered == 0
    assert exc_info.value.category == "cancelled"


@pytest.mark.asyncio
async def test_cancel_mid_sequence_returns_partial_when_requested():
    cancel = asyncio.Event()

    class _CancellingFetcher(_FakeFetcher):
        async def fetch_page(self, resource_path, *, limit, offset):
            page = await super().fetch_page(resource_path, limit=limit, offset=offset)
            if offset == 10:
                cancel.set()
            return page

    fetcher = _CancellingFetcher(100)

    result = await fetch_all(
        fetcher,
        "/items",
        page_size=10,
        max_items=50,
        cancel_event=cancel,
        partial_on_cancel=True,
    )

    assert result.cancelled is True
    assert result.requests_made == 2
    assert len(result) == 20


@pytest.mark.asyncio
@pytest.mark.parametrize("page_size, max_items", [(0, 10), (-1, 10), (10, 0), (10, -5)])
async def test_rejects_non_positive_limits(page_size, max_items):
    with pytest.raises(ValueError):
        await fetch_all(_FakeFetcher(5), "/items", page_size=page_size, max_items=max_items)
