from __future__ import annotations

import logging
from typing import Any

import httpx

from .cache import LookupCache, lookup_cache
from .config import PlacesConfig
from .errors import PlacesConfigError, PlacesUpstreamError
from .models import (
    LatLng,
    LocationSearchResult,
    NearbySearchRequest,
    PlaceDetails,
)

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({"OK", "ZERO_RESULTS"})
DETAIL_FIELDS = "name,formatted_address,formatted_phone_number,website,rating,price_level"


def is_success(page: dict[str, Any]) -> bool:
    return page.get("status") in SUCCESS_STATUSES


class PlacesClient:
    """Async wrapper around the Google Places web service."""

    def __init__(
        self,
        config: PlacesConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        cache: LookupCache | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._cache = cache if cache is not None else lookup_cache

    def ensure_configured(self) -> None:
        if not self.config.api_key:
            raise PlacesConfigError("Google Places API key not configured")

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        self.ensure_configured()
        url = f"{self.config.base_url}/{endpoint}/json"
        logger.debug("Places request: %s %s", endpoint, {k: v for k, v in params.items() if k != "key"})

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.config.timeout) as client:
                response = await client.get(url, params={**params, "key": self.config.api_key})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise PlacesUpstreamError(f"HTTP error! status: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise PlacesUpstreamError(f"Places request failed: {exc}") from exc
        except ValueError as exc:
            raise PlacesUpstreamError("Places API returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise PlacesUpstreamError("Places API returned an unexpected response body")
        return data

    async def nearby_page(
        self,
        request: NearbySearchRequest,
        origin: LatLng,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        """Fetch one page of a nearby restaurant search."""
        if page_token:
            # continuation requests carry only the token
            return await self._get("nearbysearch", {"pagetoken": page_token})

        params: dict[str, Any] = {
            "location": f"{origin.lat},{origin.lng}",
            "radius": request.radius,
            "type": "restaurant",
        }
        if request.min_price is not None:
            params["minprice"] = request.min_price
        if request.max_price is not None:
            params["maxprice"] = request.max_price
        if request.open_now:
            params["opennow"] = "true"
        if request.keyword:
            params["keyword"] = request.keyword
        return await self._get("nearbysearch", params)

    async def text_search(self, query: str) -> list[LocationSearchResult]:
        query = query.strip()
        cached = self._cache.get("textsearch", query.lower())
        if cached is not None:
            return cached

        data = await self._get("textsearch", {"query": query})
        if not is_success(data):
            raise PlacesUpstreamError(f"Places API error: {data.get('status')}", data.get("status", "ERROR"))

        results = [
            LocationSearchResult(
                place_id=r["place_id"],
                name=r.get("name", ""),
                formatted_address=r.get("formatted_address", ""),
                geometry={"location": r["geometry"]["location"]},
            )
            for r in data.get("results", [])
            if r.get("place_id") and (r.get("geometry") or {}).get("location")
        ]
        self._cache.set("textsearch", query.lower(), results)
        return results

    async def place_details(self, place_id: str) -> PlaceDetails:
        cached = self._cache.get("details", place_id)
        if cached is not None:
            return cached

        data = await self._get("details", {"place_id": place_id, "fields": DETAIL_FIELDS})
        if data.get("status") != "OK":
            raise PlacesUpstreamError(f"Places API error: {data.get('status')}", data.get("status", "ERROR"))

        details = PlaceDetails(**(data.get("result") or {}))
        self._cache.set("details", place_id, details)
        return details
