"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Provenance(str, Enum):
    """Where a sub-result came from.

    live: authoritative data from an external provider
    fallback: computed estimate standing in for missing data
    mock: static example data
    error: the provider failed or was unavailable
    """

    live = "live"
    fallback = "fallback"
    mock = "mock"
    error = "error"


class TransportMode(str, Enum):
    """Ground transport mode understood by the routing provider."""

    car = "car"
    truck = "truck"
    pedestrian = "pedestrian"
    bicycle = "bicycle"
    scooter = "scooter"


class Coordinates(BaseModel):
    """Geographic coordinates (WGS84)."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
