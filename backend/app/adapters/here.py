"""HERE adapters - geocoding (Geocode v1) and routing (Router v8)."""

import logging
import math
from typing import Any

import httpx
from pydantic import BaseModel, Field

from backend.app.adapters.result import FailureReason, ProviderResult
from backend.app.models.common import Coordinates, Provenance, TransportMode
from backend.app.models.plan import RouteResult

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://geocode.search.hereapi.com/v1/geocode"
ROUTER_URL = "https://router.hereapi.com/v8/routes"

# Provider error bodies can be large HTML pages
_MAX_ERROR_BODY = 200


# HERE response shapes (only the fields we read)
class HerePosition(BaseModel):
    lat: float
    lng: float


class HereGeocodeItem(BaseModel):
    title: str = ""
    position: HerePosition


class HereGeocodeResponse(BaseModel):
    items: list[HereGeocodeItem] = Field(default_factory=list)


class HereSectionSummary(BaseModel):
    length: float  # meters
    duration: float  # seconds


class HereSectionTransport(BaseModel):
    mode: str


class HereSection(BaseModel):
    summary: HereSectionSummary
    transport: HereSectionTransport


class HereRoute(BaseModel):
    sections: list[HereSection] = Field(default_factory=list)


class HereRouteResponse(BaseModel):
    routes: list[HereRoute] = Field(default_factory=list)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def no_route_message(transport_mode: TransportMode) -> str:
    """User-facing message for a routing request that found no path."""
    mode = transport_mode.value
    return (
        f"No {mode} route could be found between these locations. "
        f"The destination may be inaccessible by {mode}; "
        "try a different mode of transport or consider flying."
    )


def normalize_geocode_response(payload: dict[str, Any], query: str) -> ProviderResult[Coordinates]:
    """Convert a HERE geocode payload into coordinates.

    Pure function: the same payload always yields the same result.

    Args:
        payload: Decoded JSON body of a 2xx geocode response
        query: Location text that was searched (for messages)

    Returns:
        Live result with the first match, or a not_found failure

    Raises:
        pydantic.ValidationError: If the payload does not match the schema
    """
    parsed = HereGeocodeResponse.model_validate(payload)
    if not parsed.items:
        return ProviderResult.failure(
            f'No coordinates found for "{query}".', FailureReason.not_found
        )

    position = parsed.items[0].position
    return ProviderResult.live(Coordinates(lat=position.lat, lng=position.lng))


def normalize_route_response(
    payload: dict[str, Any], transport_mode: TransportMode
) -> ProviderResult[RouteResult]:
    """Convert a HERE routing payload into a RouteResult.

    Section lengths and durations are summed and rounded to whole
    kilometers and minutes; transport modes are de-duplicated in order.

    Args:
        payload: Decoded JSON body of a 2xx routing response
        transport_mode: Mode that was requested (for the no-route message)

    Returns:
        Live result, or a no_route failure when HERE returns no sections

    Raises:
        pydantic.ValidationError: If the payload does not match the schema
    """
    parsed = HereRouteResponse.model_validate(payload)
    if not parsed.routes or not parsed.routes[0].sections:
        return ProviderResult.failure(no_route_message(transport_mode), FailureReason.no_route)

    sections = parsed.routes[0].sections
    total_meters = sum(s.summary.length for s in sections)
    total_seconds = sum(s.summary.duration for s in sections)
    methods = list(dict.fromkeys(s.transport.mode for s in sections))

    return ProviderResult.live(
        RouteResult(
            distance_km=_round_half_up(total_meters / 1000),
            duration_minutes=_round_half_up(total_seconds / 60),
            transport_methods=methods,
            source=Provenance.live,
        )
    )


def _error_body(response: httpx.Response) -> str:
    body = response.text
    if len(body) > _MAX_ERROR_BODY:
        body = body[:_MAX_ERROR_BODY] + "..."
    return body


async def geocode(
    query: str,
    *,
    api_key: str,
    base_url: str = GEOCODE_URL,
    client: httpx.AsyncClient | None = None,
) -> ProviderResult[Coordinates]:
    """Resolve free-text location to coordinates.

    Args:
        query: Location text, e.g. "Toronto, Canada"
        api_key: HERE API key; empty means not configured
        base_url: Geocode endpoint
        client: Optional httpx client (for testing with mocks)

    Returns:
        ProviderResult wrapping Coordinates

    Raises:
        httpx.HTTPError: On network errors (converted by guarded_call)
    """
    if not api_key:
        return ProviderResult.failure(
            "HERE API key not configured for geocoding.", FailureReason.not_configured
        )

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=4.0)
        close_client = True

    try:
        response = await client.get(base_url, params={"q": query, "apikey": api_key, "limit": 1})
        if response.is_error:
            logger.error(f"[geocode] HERE error for {query!r}: {response.status_code}")
            return ProviderResult.failure(
                f"HERE Geocoding API error ({query}): "
                f"{response.status_code} - {_error_body(response)}",
                FailureReason.http_error,
            )

        result = normalize_geocode_response(response.json(), query)
        if result.success and result.data is not None:
            logger.info(f"[geocode] {query!r} -> {result.data.lat}, {result.data.lng}")
        return result
    finally:
        if close_client:
            await client.aclose()


async def route(
    origin: Coordinates,
    destination: Coordinates,
    transport_mode: TransportMode,
    *,
    api_key: str,
    base_url: str = ROUTER_URL,
    client: httpx.AsyncClient | None = None,
) -> ProviderResult[RouteResult]:
    """Fetch a route summary between two coordinate pairs.

    Args:
        origin: Departure coordinates
        destination: Destination coordinates
        transport_mode: HERE transport mode
        api_key: HERE API key; empty means not configured
        base_url: Router endpoint
        client: Optional httpx client (for testing with mocks)

    Returns:
        ProviderResult wrapping a live RouteResult
    """
    if not api_key:
        return ProviderResult.failure(
            "HERE API key not configured. Route data is unavailable.",
            FailureReason.not_configured,
        )

    params: dict[str, str] = {
        "transportMode": transport_mode.value,
        "origin": f"{origin.lat},{origin.lng}",
        "destination": f"{destination.lat},{destination.lng}",
        "return": "summary",
        "apikey": api_key,
    }

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=4.0)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        if response.is_error:
            return ProviderResult.failure(
                f"HERE Routing API error: {response.status_code} - {_error_body(response)}",
                FailureReason.http_error,
            )

        return normalize_route_response(response.json(), transport_mode)
    finally:
        if close_client:
            await client.aclose()
