"""Multi-vendor route resolution with validation and fallback.

Providers are tried strictly in order, one attempt each. A vendor failure
or a route that fails validation moves the chain to the next provider;
when every provider is exhausted the resolver returns ``None`` and the
caller decides how to estimate.
"""

import logging
import math
import time
from collections.abc import Sequence

from ridequote.core.exceptions import DataIntegrityWarning, ProviderFailure, RejectionReason
from ridequote.geo.models import (
    Coordinate,
    RouteOptions,
    RoutePlan,
    RouteResponse,
    RouteSource,
)
from ridequote.geo.providers.base import RoutingProvider
from ridequote.metrics import record_routing_attempt

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def normalize_route(
    response: RouteResponse,
    source: RouteSource,
    provider: str,
    options: RouteOptions,
) -> RoutePlan:
    """Convert vendor units to km/minutes and validate the path.

    Raises DataIntegrityWarning with the rejection reason when the route is
    unusable.
    """
    distance_km = round_half_up(response.distance_meters / 1000)
    duration_minutes = round_half_up(response.duration_seconds / 60)

    if len(response.geometry) < options.min_geometry_points:
        raise DataIntegrityWarning(
            RejectionReason.INSUFFICIENT_GEOMETRY,
            details={
                "geometry_points": len(response.geometry),
                "min_geometry_points": options.min_geometry_points,
            },
        )
    if distance_km > options.max_distance_km:
        raise DataIntegrityWarning(
            RejectionReason.DISTANCE_OUT_OF_RANGE,
            details={
                "distance_km": distance_km,
                "max_distance_km": options.max_distance_km,
            },
        )

    return RoutePlan(
        distance_km=distance_km,
        duration_minutes=duration_minutes,
        geometry=response.geometry,
        source=source,
        provider=provider,
    )


class RouteResolver:
    def __init__(
        self,
        providers: Sequence[RoutingProvider],
        default_options: RouteOptions | None = None,
        timeout: float | None = None,
    ) -> None:
        if not providers:
            raise ValueError("RouteResolver needs at least one routing provider")
        self.providers = list(providers)
        self.default_options = default_options or RouteOptions()
        self.timeout = timeout

    async def resolve(
        self,
        origin: Coordinate,
        destination: Coordinate,
        options: RouteOptions | None = None,
        *,
        timeout: float | None = None,
    ) -> RoutePlan | None:
        options = options or self.default_options
        timeout = timeout if timeout is not None else self.timeout

        for index, provider in enumerate(self.providers):
            source = RouteSource.PRIMARY if index == 0 else RouteSource.SECONDARY
            start_time = time.perf_counter()
            try:
                response = await provider.route(origin, destination, timeout=timeout)
                plan = normalize_route(response, source, provider.name, options)
            except DataIntegrityWarning as e:
                record_routing_attempt(
                    provider.name, e.reason.value, time.perf_counter() - start_time
                )
                logger.warning(
                    "%s route rejected (%s): %s", provider.name, e.reason.value, e.details
                )
                continue
            except ProviderFailure as e:
                record_routing_attempt(
                    provider.name,
                    RejectionReason.PROVIDER_FAILURE.value,
                    time.perf_counter() - start_time,
                )
                logger.warning(
                    "%s route rejected (%s): %s",
                    provider.name,
                    RejectionReason.PROVIDER_FAILURE.value,
                    e.message,
                )
                continue

            record_routing_attempt(provider.name, "accepted", time.perf_counter() - start_time)
            logger.info(
                "%s route accepted: %.1f km, %.1f min, %d points",
                provider.name,
                plan.distance_km,
                plan.duration_minutes,
                len(plan.geometry),
            )
            return plan

        logger.warning("All routing providers failed")
        return None
