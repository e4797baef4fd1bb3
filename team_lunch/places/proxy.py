from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError

from ..analytics.store import record_event
from ..records.store import get_store
from .aggregator import search_nearby
from .client import PlacesClient
from .config import PlacesConfig
from .errors import PlacesError
from .models import (
    LatLng,
    NearbySearchRequest,
    PlaceDetailsRequest,
    TextSearchRequest,
)

logger = logging.getLogger(__name__)

ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

REQUEST_MODELS: dict[str, type[BaseModel]] = {
    "nearby": NearbySearchRequest,
    "textsearch": TextSearchRequest,
    "details": PlaceDetailsRequest,
}

proxy_app = FastAPI(title="Places Proxy")
proxy_app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=ALLOWED_HEADERS,
)


def get_places_client() -> PlacesClient:
    return PlacesClient(PlacesConfig.from_env())


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def _parse(body: Any) -> tuple[str, BaseModel]:
    if not isinstance(body, dict):
        raise PlacesError("Request body must be a JSON object")
    params = dict(body)
    search_type = params.pop("searchType", None)
    model = REQUEST_MODELS.get(search_type)
    if model is None:
        raise PlacesError(f"Unknown search type: {search_type}")
    try:
        return search_type, model.model_validate(params)
    except ValidationError as exc:
        raise PlacesError(_describe(exc)) from exc


def _origin_for(request: NearbySearchRequest) -> LatLng:
    if request.lat is not None and request.lng is not None:
        return LatLng(lat=request.lat, lng=request.lng)
    office = get_store().get_office_location()
    if office is None:
        raise PlacesError("Search origin required: pass lat and lng or configure the office location")
    return LatLng(lat=office.lat, lng=office.lng)


async def _dispatch(search_type: str, request: BaseModel, client: PlacesClient) -> dict[str, Any]:
    if search_type == "nearby":
        outcome = await search_nearby(client, request, _origin_for(request))
        return outcome.model_dump()
    if search_type == "textsearch":
        results = await client.text_search(request.query)
        return {"status": "OK", "results": [r.model_dump() for r in results]}
    details = await client.place_details(request.place_id)
    return {"status": "OK", "result": details.model_dump()}


def _failure(search_type: str | None, start_time: float, message: str) -> JSONResponse:
    record_event("places_search", {
        "search_type": search_type or "unknown",
        "ok": False,
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
    })
    return JSONResponse({"error": message, "status": "ERROR"}, status_code=400)


@proxy_app.options("/places-proxy")
def places_proxy_options() -> PlainTextResponse:
    return PlainTextResponse("ok")


@proxy_app.post("/places-proxy")
async def places_proxy(
    request: Request,
    client: PlacesClient = Depends(get_places_client),
) -> JSONResponse:
    start_time = time.time()
    search_type: str | None = None
    try:
        try:
            body = await request.json()
        except ValueError:
            raise PlacesError("Request body must be valid JSON") from None
        search_type, parsed = _parse(body)
        payload = await _dispatch(search_type, parsed, client)
    except PlacesError as exc:
        logger.error("Error in places proxy: %s", exc)
        return _failure(search_type, start_time, str(exc))
    except Exception as exc:
        logger.exception("Unexpected error in places proxy")
        return _failure(search_type, start_time, str(exc) or type(exc).__name__)

    record_event("places_search", {
        "search_type": search_type,
        "ok": True,
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
        "results_count": len(payload.get("results", [])) if "results" in payload else 1,
        "truncated": payload.get("truncated", False),
    })
    return JSONResponse(payload)
