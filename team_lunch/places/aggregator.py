"""
Nearby search aggregation.

The Places nearby endpoint returns at most 20 results per page and hands
out a ``next_page_token`` for the following page.  A fresh token is not
usable straight away, so every continuation request is preceded by a
fixed wait (``PlacesConfig.page_delay_seconds``, 2 s).  The wait is an
``await``, so other requests keep being served meanwhile.

Failure rules:

* first page fails (HTTP error or non-success status): the search fails.
* a continuation page fails: pagination stops, the pages already fetched
  are returned and ``truncated`` is set.

Every result gets a ``distance_meters`` field measured from the search
origin, and the merged list is ordered nearest first.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable

from .client import PlacesClient, is_success
from .errors import PlacesUpstreamError
from .geo import distance_meters
from .models import LatLng, NearbySearchRequest, NearbySearchResult

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def _with_distance(result: dict[str, Any], origin: LatLng) -> dict[str, Any]:
    geometry = result.get("geometry")
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        location = {}
    lat, lng = location.get("lat"), location.get("lng")
    enriched = dict(result)
    if isinstance(lat, (int, float)) and isinstance(lng, (int, float)):
        enriched["distance_meters"] = distance_meters(origin.lat, origin.lng, lat, lng)
    else:
        enriched["distance_meters"] = None
    return enriched


def sort_by_distance(results: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Nearest first; results without coordinates go last."""
    return sorted(
        results,
        key=lambda r: r["distance_meters"] if r.get("distance_meters") is not None else math.inf,
    )


async def search_nearby(
    client: PlacesClient,
    request: NearbySearchRequest,
    origin: LatLng,
    sleep: Sleep = asyncio.sleep,
) -> NearbySearchResult:
    client.ensure_configured()
    config = client.config

    first = await client.nearby_page(request, origin)
    if not is_success(first):
        status = first.get("status", "ERROR")
        raise PlacesUpstreamError(f"Places API error: {status}", status)

    pages = [first]
    token = first.get("next_page_token")
    truncated = False

    while token and len(pages) < config.max_pages:
        await sleep(config.page_delay_seconds)
        try:
            page = await client.nearby_page(request, origin, page_token=token)
        except PlacesUpstreamError as exc:
            logger.warning("Stopping pagination after %d pages: %s", len(pages), exc)
            truncated = True
            break
        if not is_success(page):
            logger.warning(
                "Stopping pagination after %d pages: status %s", len(pages), page.get("status"),
            )
            truncated = True
            break
        pages.append(page)
        token = page.get("next_page_token")

    merged = [_with_distance(r, origin) for page in pages for r in page.get("results", [])]
    logger.info(
        "Nearby search fetched %d pages, %d results (truncated=%s)",
        len(pages), len(merged), truncated,
    )

    return NearbySearchResult(
        status=first.get("status", "OK"),
        results=sort_by_distance(merged),
        truncated=truncated,
        pages_fetched=len(pages),
        next_page_token=None if truncated else token,
    )
