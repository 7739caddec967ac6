"""Sequential offset-based aggregation over a paged catalog resource."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .domain import AggregatedResult, FetchPage
from .errors import AggregationCancelledError, FetchError
from .ports import PageFetcherPort

logger = logging.getLogger(__name__)


async def fetch_all(
    fetcher: PageFetcherPort,
    resource_path: str,
    *,
    page_size: int,
    max_items: int,
    cancel_event: asyncio.Event | None = None,
    partial_on_cancel: bool = False,
) -> AggregatedResult:
    """Fetch pages at offsets ``0, page_size, 2*page_size, ...`` in order.

    Stops on the first short page or once ``max_items`` have been gathered.
    Requests are issued one at a time; offset N+1 is only requested after
    offset N has answered. A ``FetchError`` on any page aborts the whole
    aggregation and nothing gathered so far is returned.

    When ``cancel_event`` is set before a request is issued, the aggregation
    either raises ``AggregationCancelledError`` or, with
    ``partial_on_cancel``, returns what it has with ``cancelled=True``.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if max_items <= 0:
        raise ValueError(f"max_items must be positive, got {max_items}")

    items: list[Any] = []
    offset = 0
    requests_made = 0

    while True:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(
                "Aggregation of %s cancelled after %d request(s), %d item(s).",
                resource_path, requests_made, len(items),
            )
            if partial_on_cancel:
                return AggregatedResult(
                    items=tuple(items),
                    requests_made=requests_made,
                    cancelled=True,
                )
            raise AggregationCancelledError(gathered=len(items))

        logger.debug("Fetching %s limit=%d offset=%d", resource_path, page_size, offset)
        try:
            raw = await fetcher.fetch_page(resource_path, limit=page_size, offset=offset)
        except FetchError as e:
            logger.warning(
                "Aggregation of %s aborted at offset %d, discarding %d item(s): %s",
                resource_path, offset, len(items), e,
            )
            raise
        requests_made += 1
        page = FetchPage.from_items(raw, limit=page_size)

        remaining = max_items - len(items)
        items.extend(page.items[:remaining])

        if len(items) >= max_items:
            logger.info(
                "Aggregation of %s reached max_items=%d after %d request(s).",
                resource_path, max_items, requests_made,
            )
            return AggregatedResult(
                items=tuple(items),
                requests_made=requests_made,
                truncated=True,
            )

        if not page.has_more:
            logger.info(
                "Aggregation of %s complete: %d item(s) in %d request(s).",
                resource_path, len(items), requests_made,
            )
            return AggregatedResult(items=tuple(items), requests_made=requests_made)

        offset += page_size
