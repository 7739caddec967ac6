"""Stateless core orchestration: authorization disambiguation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Sequence

from .domain import AuthorizationOutcome, AuthorizationResolution
from .errors import AuthorizationCategory, AuthorizationError
from .ports import MusicKitPort

logger = logging.getLogger(__name__)

DEFAULT_RECOVERY_DELAYS: tuple[float, ...] = (0.0, 1.0)

Sleep = Callable[[float], Awaitable[Any]]


async def _read_side_channel(
    sdk: MusicKitPort,
    handle: Any,
    *,
    recovery_delays: Sequence[float],
    sleep: Sleep,
) -> tuple[str, int]:
    """Re-read the SDK's token side channel after each delay.

    Returns the first non-empty token (or ``""``) and the number of reads made.
    """
    reads = 0
    for delay in recovery_delays:
        if delay > 0:
            await sleep(delay)
        reads += 1
        try:
            token = await sdk.current_user_token(handle)
        except AuthorizationError as e:
            logger.debug("Side-channel token read %d failed: %s", reads, e)
            continue
        if token:
            return token, reads
    return "", reads


async def resolve_authorization(
    sdk: MusicKitPort,
    handle: Any,
    *,
    recovery_delays: Sequence[float] = DEFAULT_RECOVERY_DELAYS,
    sleep: Sleep = asyncio.sleep,
) -> AuthorizationOutcome:
    """Run one authorize call and classify its result.

    The SDK is known to raise a spurious error (typically a storefront error)
    after the consent exchange has already completed. The error path is
    checked first; only then is the side channel consulted, so a genuine
    denial with an empty side channel still fails.
    """
    try:
        token = await sdk.authorize(handle)
    except AuthorizationError as e:
        error = e
        logger.warning("MusicKit authorize reported an error, checking side channel: %s", e)
    else:
        if token:
            return AuthorizationOutcome(
                resolution=AuthorizationResolution.DIRECT,
                music_user_token=token,
            )
        error = AuthorizationError(
            "MusicKit returned an empty music user token",
            category=AuthorizationCategory.UNKNOWN,
        )
        logger.warning("MusicKit authorize returned no token, checking side channel.")

    token, reads = await _read_side_channel(
        sdk,
        handle,
        recovery_delays=recovery_delays,
        sleep=sleep,
    )
    if token:
        logger.info(
            "Recovered music user token via side channel after %d read(s) (suppressed: %s).",
            reads, error.sdk_code or error.authorization_category.value,
        )
        return AuthorizationOutcome(
            resolution=AuthorizationResolution.RECOVERED_VIA_SIDE_CHANNEL,
            music_user_token=token,
            error=error,
            side_channel_reads=reads,
        )

    return AuthorizationOutcome(
        resolution=AuthorizationResolution.FAILED,
        error=error,
        side_channel_reads=reads,
    )
