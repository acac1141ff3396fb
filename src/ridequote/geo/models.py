import math
from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ridequote.core.exceptions import RejectionReason, ValidationError

__all__ = [
    "Coordinate",
    "PlaceSuggestion",
    "RejectionReason",
    "RouteOptions",
    "RoutePlan",
    "RouteResponse",
    "RouteSource",
]


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    @model_validator(mode="after")
    def check_bounds(self) -> Self:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError("Coordinates must be finite numbers")
        if not -90 <= self.lat <= 90:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180 <= self.lng <= 180:
            raise ValueError(f"Longitude out of range: {self.lng}")
        return self

    @classmethod
    def parse(cls, lat: float, lng: float) -> "Coordinate":
        """Build a coordinate, raising ValidationError on malformed input."""
        try:
            return cls(lat=lat, lng=lng)
        except ValueError as e:
            raise ValidationError(
                "Malformed coordinate", details={"lat": lat, "lng": lng}
            ) from e

    def as_lng_lat(self) -> list[float]:
        return [self.lng, self.lat]


class RouteSource(str, Enum):
    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"


class RouteResponse(BaseModel):
    """Raw directions result from a vendor, in vendor units."""

    distance_meters: float = Field(ge=0)
    duration_seconds: float = Field(ge=0)
    geometry: list[Coordinate]


class RouteOptions(BaseModel):
    max_distance_km: float = Field(default=100.0, gt=0)
    min_geometry_points: int = Field(default=5, ge=2)


class RoutePlan(BaseModel):
    distance_km: float
    duration_minutes: float
    geometry: list[Coordinate]
    source: RouteSource
    provider: str


class PlaceSuggestion(BaseModel):
    id: str
    label: str
    address: str
    lat: float
    lng: float
    place_type: str = "address"
    relevance: float = 0.0

    def to_coordinate(self) -> Coordinate:
        return Coordinate.parse(self.lat, self.lng)
