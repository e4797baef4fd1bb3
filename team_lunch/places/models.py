from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    # proxy bodies use camelCase keys
    model_config = ConfigDict(populate_by_name=True)


class NearbySearchRequest(_WireModel):
    lat: float | None = Field(default=None, ge=-90.0, le=90.0)
    lng: float | None = Field(default=None, ge=-180.0, le=180.0)
    radius: int = Field(default=2000, gt=0, le=50000)
    min_price: int | None = Field(default=None, ge=0, le=4, alias="minPrice")
    max_price: int | None = Field(default=None, ge=0, le=4, alias="maxPrice")
    open_now: bool = Field(default=False, alias="openNow")
    keyword: str | None = None


class TextSearchRequest(_WireModel):
    query: str = Field(..., min_length=1)


class PlaceDetailsRequest(_WireModel):
    place_id: str = Field(..., min_length=1, alias="placeId")


class LatLng(BaseModel):
    lat: float
    lng: float


class Geometry(BaseModel):
    location: LatLng


class LocationSearchResult(BaseModel):
    place_id: str
    name: str
    formatted_address: str = ""
    geometry: Geometry


class PlaceDetails(BaseModel):
    name: str | None = None
    formatted_address: str | None = None
    formatted_phone_number: str | None = None
    website: str | None = None
    rating: float | None = None
    price_level: int | None = None


class NearbySearchResult(BaseModel):
    status: str = "OK"
    results: list[dict[str, Any]] = Field(default_factory=list)
    truncated: bool = False
    pages_fetched: int = 0
    next_page_token: str | None = None
