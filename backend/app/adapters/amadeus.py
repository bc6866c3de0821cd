"""Amadeus flight search adapter (Self-Service API, OAuth2 client credentials)."""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx
from pydantic import BaseModel, Field

from backend.app.adapters.airports import resolve_airport_code
from backend.app.adapters.result import FailureReason, ProviderResult
from backend.app.models.common import Provenance
from backend.app.models.plan import FlightResult, FlightSegment

logger = logging.getLogger(__name__)

AMADEUS_BASE_URL = "https://test.api.amadeus.com"
TOKEN_PATH = "/v1/security/oauth2/token"
FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"

NO_OFFERS_NOTE = "No flight offers found for the given criteria."

_CENT = Decimal("0.01")


# Amadeus response shapes (only the fields we read)
class AmadeusToken(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 1799


class AmadeusEndpoint(BaseModel):
    iataCode: str
    at: str = ""


class AmadeusSegment(BaseModel):
    departure: AmadeusEndpoint
    arrival: AmadeusEndpoint
    carrierCode: str
    duration: str = ""


class AmadeusItinerary(BaseModel):
    duration: str = ""
    segments: list[AmadeusSegment] = Field(default_factory=list)


class AmadeusPrice(BaseModel):
    total: Decimal
    currency: str = ""


class AmadeusOffer(BaseModel):
    price: AmadeusPrice
    itineraries: list[AmadeusItinerary] = Field(default_factory=list)


class AmadeusOffersResponse(BaseModel):
    data: list[AmadeusOffer] = Field(default_factory=list)


def normalize_flight_offers(payload: dict[str, Any]) -> ProviderResult[FlightResult]:
    """Convert a flight-offers payload into a FlightResult.

    Only the first (best) offer is used. Its total price is split evenly
    across the first itinerary's segments. Zero offers is a live result
    with no segments, not a failure.

    Raises:
        pydantic.ValidationError: If the payload does not match the schema
    """
    parsed = AmadeusOffersResponse.model_validate(payload)
    if not parsed.data:
        return ProviderResult.live(FlightResult(source=Provenance.live), note=NO_OFFERS_NOTE)

    best = parsed.data[0]
    total = best.price.total
    legs = best.itineraries[0].segments if best.itineraries else []

    segments: list[FlightSegment] = []
    if legs:
        per_segment = (total / len(legs)).quantize(_CENT, rounding=ROUND_HALF_UP)
        segments = [
            FlightSegment(
                departure_code=leg.departure.iataCode,
                arrival_code=leg.arrival.iataCode,
                price=per_segment,
                duration=leg.duration,
                airline_code=leg.carrierCode,
            )
            for leg in legs
        ]

    return ProviderResult.live(
        FlightResult(segments=segments, total_price=total, source=Provenance.live)
    )


async def fetch_access_token(
    client: httpx.AsyncClient,
    *,
    client_id: str,
    client_secret: str,
    base_url: str = AMADEUS_BASE_URL,
) -> ProviderResult[str]:
    """Exchange client credentials for a bearer token."""
    if not client_id or not client_secret:
        return ProviderResult.failure(
            "Amadeus API credentials not configured.", FailureReason.not_configured
        )

    response = await client.post(
        f"{base_url}{TOKEN_PATH}",
        data={
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    if response.is_error:
        return ProviderResult.failure(
            f"Amadeus auth failed: {response.status_code} - {response.text[:200]}",
            FailureReason.http_error,
        )

    token = AmadeusToken.model_validate(response.json())
    return ProviderResult.live(token.access_token)


def _unresolvable_message(origin: str, destination: str, origin_ok: bool, dest_ok: bool) -> str:
    parts = []
    if not origin_ok:
        parts.append(f'origin "{origin}"')
    if not dest_ok:
        parts.append(f'destination "{destination}"')
    return f"Could not determine airport code for {' and '.join(parts)}. Flight search cannot proceed."


async def search_flights(
    origin: str,
    destination: str,
    departure_date: date,
    *,
    client_id: str,
    client_secret: str,
    airport_codes: dict[str, str],
    base_url: str = AMADEUS_BASE_URL,
    client: httpx.AsyncClient | None = None,
) -> ProviderResult[FlightResult]:
    """Search the best one-adult flight offer between two locations.

    Locations are free text; they are resolved to IATA codes first and the
    API is never called with a placeholder code.

    Args:
        origin: Departure location text
        destination: Destination location text
        departure_date: Outbound date
        client_id: Amadeus client id; empty means not configured
        client_secret: Amadeus client secret; empty means not configured
        airport_codes: City -> IATA table
        base_url: Amadeus API base URL
        client: Optional httpx client (for testing with mocks)

    Returns:
        ProviderResult wrapping a live FlightResult
    """
    if not client_id or not client_secret:
        return ProviderResult.failure(
            "Amadeus API credentials not configured.", FailureReason.not_configured
        )

    origin_code = resolve_airport_code(origin, airport_codes)
    destination_code = resolve_airport_code(destination, airport_codes)
    if origin_code is None or destination_code is None:
        return ProviderResult.failure(
            _unresolvable_message(
                origin, destination, origin_code is not None, destination_code is not None
            ),
            FailureReason.unresolvable,
        )

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=4.0)
        close_client = True

    try:
        token = await fetch_access_token(
            client, client_id=client_id, client_secret=client_secret, base_url=base_url
        )
        if not token.success or not token.data:
            return ProviderResult.failure(
                token.error or "Amadeus token acquisition failed.",
                token.reason or FailureReason.http_error,
            )

        params: dict[str, str | int] = {
            "originLocationCode": origin_code,
            "destinationLocationCode": destination_code,
            "departureDate": departure_date.isoformat(),
            "adults": 1,
            "max": 1,
        }
        logger.info(f"[flights] {origin_code} -> {destination_code} on {departure_date}")

        response = await client.get(
            f"{base_url}{FLIGHT_OFFERS_PATH}",
            params=params,
            headers={"Authorization": f"Bearer {token.data}"},
        )
        if response.is_error:
            return ProviderResult.failure(
                f"Amadeus Flight API error: {response.status_code} - {response.text[:200]}",
                FailureReason.http_error,
            )

        return normalize_flight_offers(response.json())
    finally:
        if close_client:
            await client.aclose()
