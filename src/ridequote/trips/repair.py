"""Backfill route geometry for stored trips that were priced from an estimate."""

import logging
from typing import Protocol

from pydantic import BaseModel

from ridequote.geo.models import Coordinate, RoutePlan
from ridequote.geo.route_resolver import RouteResolver
from ridequote.quote_logging import with_correlation

logger = logging.getLogger(__name__)


class StoredTrip(BaseModel):
    trip_id: str
    origin_location: Coordinate | None = None
    destination_location: Coordinate | None = None


class TripRouteStore(Protocol):
    """Persistence collaborator that knows which trips lack geometry."""

    async def find_trips_missing_geometry(self, limit: int) -> list[StoredTrip]: ...

    async def save_route(self, trip_id: str, plan: RoutePlan) -> None: ...


class RepairSummary(BaseModel):
    examined: int = 0
    repaired: int = 0
    skipped: int = 0
    failed: int = 0


class RouteRepairJob:
    def __init__(self, resolver: RouteResolver, store: TripRouteStore) -> None:
        self.resolver = resolver
        self.store = store

    async def run(self, limit: int = 50) -> RepairSummary:
        summary = RepairSummary()
        trips = await self.store.find_trips_missing_geometry(limit)

        for trip in trips:
            summary.examined += 1
            if trip.origin_location is None or trip.destination_location is None:
                summary.skipped += 1
                continue

            with with_correlation(trip.trip_id):
                plan = await self.resolver.resolve(
                    trip.origin_location, trip.destination_location
                )
                if plan is None:
                    summary.failed += 1
                    logger.warning("Could not repair route for trip %s", trip.trip_id)
                    continue

                await self.store.save_route(trip.trip_id, plan)
                summary.repaired += 1
                logger.info(
                    "Repaired route for trip %s from %s (%d points)",
                    trip.trip_id,
                    plan.provider,
                    len(plan.geometry),
                )

        logger.info(
            "Route repair finished: examined=%d repaired=%d skipped=%d failed=%d",
            summary.examined,
            summary.repaired,
            summary.skipped,
            summary.failed,
        )
        return summary
