"""Trip search workflow: geocode, route, estimate if needed, then price."""

import logging
import random
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Literal, Protocol

from pydantic import BaseModel, Field

from ridequote.core.exceptions import ValidationError
from ridequote.geo.distance import (
    MIN_ESTIMATED_DISTANCE_KM,
    estimate_distance_km,
    estimate_duration_minutes,
    straight_line_distance_km,
)
from ridequote.geo.geocoder import Geocoder
from ridequote.geo.models import Coordinate
from ridequote.geo.route_resolver import RouteResolver, round_half_up
from ridequote.pricing.aggregator import QuoteAggregator
from ridequote.pricing.models import ProviderQuote, TimeContext, load_timezone
from ridequote.quote_logging import with_correlation

logger = logging.getLogger(__name__)

MIN_ROUTED_DISTANCE_KM = 0.1
MIN_ROUTED_DURATION_MINUTES = 1.0


class PlaceInput(BaseModel):
    """A trip endpoint: a label, optionally with coordinates already known."""

    label: str
    address: str | None = None
    lat: float | None = None
    lng: float | None = None

    def coordinate(self) -> Coordinate | None:
        if self.lat is None or self.lng is None:
            return None
        return Coordinate.parse(self.lat, self.lng)


class TripSearchRequest(BaseModel):
    origin: PlaceInput
    destination: PlaceInput


class TripSearchResult(BaseModel):
    trip_id: str
    origin_label: str
    destination_label: str
    origin_location: Coordinate | None = None
    destination_location: Coordinate | None = None
    distance_km: float
    duration_minutes: float
    route_geometry: list[Coordinate] = Field(default_factory=list)
    route_source: Literal["PRIMARY", "SECONDARY", "ESTIMATE"]
    used_fallback: bool
    quotes: list[ProviderQuote]
    created_at: datetime


class TripSink(Protocol):
    """Persistence collaborator for searched trips."""

    async def save(self, result: TripSearchResult) -> None: ...


class TripSearchService:
    def __init__(
        self,
        geocoder: Geocoder,
        resolver: RouteResolver,
        aggregator: QuoteAggregator,
        sink: TripSink | None = None,
        clock: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
        timezone: str = "Asia/Manila",
    ) -> None:
        self.geocoder = geocoder
        self.resolver = resolver
        self.aggregator = aggregator
        self.sink = sink
        tz = load_timezone(timezone)
        self._clock = clock or (lambda: datetime.now(tz))
        self._rng = rng or random.Random()

    async def _locate(self, place: PlaceInput) -> tuple[str, Coordinate | None]:
        coordinate = place.coordinate()
        if coordinate is not None:
            return place.label, coordinate

        match = await self.geocoder.resolve(place.label)
        if match is None:
            return place.label, None
        return match.label, match.to_coordinate()

    async def search(self, request: TripSearchRequest) -> TripSearchResult:
        if not request.origin.label.strip() or not request.destination.label.strip():
            raise ValidationError("Origin and destination are required")

        trip_id = uuid.uuid4().hex
        with with_correlation(trip_id):
            return await self._search(trip_id, request)

    async def _search(self, trip_id: str, request: TripSearchRequest) -> TripSearchResult:
        origin_label, origin = await self._locate(request.origin)
        destination_label, destination = await self._locate(request.destination)

        plan = None
        if origin is not None and destination is not None:
            plan = await self.resolver.resolve(origin, destination)

        if plan is not None:
            # Sub-50 m routes round to zero; price them as the shortest billable trip
            distance_km = max(MIN_ROUTED_DISTANCE_KM, plan.distance_km)
            duration_minutes = max(MIN_ROUTED_DURATION_MINUTES, plan.duration_minutes)
        else:
            if origin is not None and destination is not None:
                distance_km = max(
                    MIN_ESTIMATED_DISTANCE_KM,
                    round_half_up(straight_line_distance_km(origin, destination)),
                )
            else:
                distance_km = estimate_distance_km(origin_label, destination_label, self._rng)
            duration_minutes = estimate_duration_minutes(distance_km)
            logger.warning(
                "Falling back to estimate for %r -> %r: %.1f km, %d min",
                origin_label,
                destination_label,
                distance_km,
                duration_minutes,
            )

        created_at = self._clock()
        quotes = self.aggregator.quote(
            distance_km,
            duration_minutes,
            origin_label,
            TimeContext.from_datetime(created_at),
        )

        result = TripSearchResult(
            trip_id=trip_id,
            origin_label=origin_label,
            destination_label=destination_label,
            origin_location=origin,
            destination_location=destination,
            distance_km=distance_km,
            duration_minutes=duration_minutes,
            route_geometry=plan.geometry if plan else [],
            route_source=plan.source.value if plan else "ESTIMATE",
            used_fallback=plan is None,
            quotes=quotes,
            created_at=created_at,
        )

        if self.sink is not None:
            await self.sink.save(result)
        return result
