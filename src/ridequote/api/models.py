"""Request/response bodies for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field

from ridequote.geo.models import Coordinate, RouteOptions
from ridequote.pricing.models import TimeContext


class QuoteRequest(BaseModel):
    distance_km: float = Field(gt=0)
    duration_minutes: float = Field(gt=0)
    origin_label: str = ""
    context: TimeContext | None = None


class RouteRequest(BaseModel):
    origin: Coordinate
    destination: Coordinate
    options: RouteOptions | None = None


class HealthResponse(BaseModel):
    status: Literal["healthy"]
    providers: list[str]
