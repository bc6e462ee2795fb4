"""
Async avatar resolution for a batch of sponsorships.

The fallback image is resolved once, then every sponsorship is processed concurrently: its
avatar is downloaded (or replaced by the fallback for private sponsors), and the rounded
high/medium/low resolution variants are attached to the sponsor record in place.
"""

import asyncio
from collections.abc import Sequence
from typing import Any, assert_never

import httpx
import structlog

from sponsors.management.commands._avatars.images import (
    bytes_to_base64,
    png_to_data_uri,
    round_image,
)
from sponsors.management.commands._avatars.types import (
    ErrorLogger,
    FallbackAvatar,
    FallbackBytes,
    FallbackUrl,
    NoFallback,
)
from sponsors.types import Sponsorship


logger = structlog.get_logger(__name__)

#: Corner radius (fraction of the size) for organizations: near-square corners.
ORGANIZATION_RADIUS = 0.1
#: Corner radius for individual sponsors: a full circle.
USER_RADIUS = 0.5

#: Square sizes in pixels of the high, medium, and low resolution variants.
HIGH_RES_SIZE = 120
MEDIUM_RES_SIZE = 80
LOW_RES_SIZE = 50

#: Geometry of the shared data URI shown for private sponsors.
FALLBACK_RADIUS = 0.5
FALLBACK_SIZE = 100

#: httpx's own default timeout, in seconds.
DEFAULT_TIMEOUT = 5.0


# ---------------------------------------------------------------------------
# Download helpers
# ---------------------------------------------------------------------------


async def fetch_avatar_bytes(client: httpx.AsyncClient, url: str) -> bytes:
    """GET *url* with *client* and return the raw body. Raise on transport or HTTP errors."""
    resp = await client.get(url)
    resp.raise_for_status()
    return resp.content


async def resolve_fallback(client: httpx.AsyncClient, source: FallbackAvatar) -> bytes | None:
    """
    Turn the configured fallback *source* into raw image bytes.

    Download errors for :class:`FallbackUrl` are deliberately not caught.
    """
    match source:
        case FallbackUrl(url=url):
            return await fetch_avatar_bytes(client, url)
        case FallbackBytes(data=data):
            return data
        case NoFallback():
            return None
        case _:
            assert_never(source)


# ---------------------------------------------------------------------------
# Per-sponsor resolution
# ---------------------------------------------------------------------------


def corner_radius(ship: Sponsorship) -> float:
    """Return the rounding radius fraction for the sponsor behind *ship*."""
    return ORGANIZATION_RADIUS if ship.sponsor.is_organization else USER_RADIUS


async def _rounded_data_uri(data: bytes, radius: float, size: int) -> str:
    png = await asyncio.to_thread(round_image, data, radius, size)
    return png_to_data_uri(png)


async def _resolve_sponsorship(
    client: httpx.AsyncClient,
    ship: Sponsorship,
    fallback_bytes: bytes | None,
    fallback_data_uri: str | None,
    log: ErrorLogger,
) -> None:
    """Fetch (or substitute) one sponsor's avatar and attach the derived representations."""
    sponsor = ship.sponsor

    if ship.is_private:
        data = fallback_bytes
    else:
        try:
            data = await fetch_avatar_bytes(client, sponsor.avatar_url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.error(
                f"Failed to fetch avatar for {sponsor.display_name} [{sponsor.avatar_url}]",
                sponsor=sponsor.display_name,
                url=sponsor.avatar_url,
                error=str(exc),
            )
            if fallback_bytes is None:
                raise
            data = fallback_bytes

    # Private sponsors never expose their real avatar URL
    if ship.is_private and fallback_data_uri is not None:
        sponsor.avatar_url = fallback_data_uri

    if data is None:
        return

    radius = corner_radius(ship)
    sponsor.avatar_buffer = bytes_to_base64(data)
    sponsor.avatar_url_high_res = await _rounded_data_uri(data, radius, HIGH_RES_SIZE)
    sponsor.avatar_url_medium_res = await _rounded_data_uri(data, radius, MEDIUM_RES_SIZE)
    sponsor.avatar_url_low_res = await _rounded_data_uri(data, radius, LOW_RES_SIZE)


# ---------------------------------------------------------------------------
# Batch resolution
# ---------------------------------------------------------------------------


async def _resolve_batch(
    client: httpx.AsyncClient,
    ships: Sequence[Sponsorship],
    fallback: FallbackAvatar,
    log: ErrorLogger,
) -> None:
    fallback_bytes = await resolve_fallback(client, fallback)
    fallback_data_uri = None
    if fallback_bytes is not None:
        fallback_data_uri = await _rounded_data_uri(fallback_bytes, FALLBACK_RADIUS, FALLBACK_SIZE)

    # Wait for every sponsor, even after a failure; siblings are never cancelled.
    results = await asyncio.gather(
        *(
            _resolve_sponsorship(client, ship, fallback_bytes, fallback_data_uri, log)
            for ship in ships
        ),
        return_exceptions=True,
    )
    failures = [result for result in results if isinstance(result, BaseException)]
    if failures:
        # Each failure was already logged; surface the first one in record order.
        raise failures[0]


async def resolve_avatars(
    ships: Sequence[Sponsorship],
    fallback: FallbackAvatar | None = None,
    *,
    log: ErrorLogger | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """
    Resolve avatars for all *ships*, mutating each sponsor in place.

    Parameters
    ----------
    ships:
        Sponsorships to process. Each sponsor gets ``avatar_buffer`` and the three
        ``avatar_url_*_res`` data URIs whenever image data (fetched or fallback) is available.
    fallback:
        Image used for private sponsors and for avatars that fail to download.
    log:
        Logger receiving one ``error`` event per failed download. Defaults to the module's
        structlog logger.
    client:
        Shared ``httpx.AsyncClient``. When omitted, one is created for the batch and closed after.
    timeout:
        Request timeout for the client created here; ignored when *client* is given.

    Raises
    ------
    httpx.HTTPError
        If the fallback URL cannot be downloaded, or an avatar download fails while no fallback
        is configured. All sponsors are still processed before the first such error is raised.

    """
    if fallback is None:
        fallback = NoFallback()
    log = log or logger

    if client is not None:
        await _resolve_batch(client, ships, fallback, log)
        return

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned_client:
        await _resolve_batch(owned_client, ships, fallback, log)


def resolve_avatars_sync(
    ships: Sequence[Sponsorship],
    fallback: FallbackAvatar | None = None,
    **kwargs: Any,
) -> None:
    """Run :func:`resolve_avatars` synchronously via :func:`asyncio.run`."""
    asyncio.run(resolve_avatars(ships, fallback, **kwargs))
