"""
Ride Quote API - entry point

Wires settings, logging, the routing provider chain and the pricing engine
into the FastAPI app and serves it with uvicorn.
"""

import logging
import os

import uvicorn
from fastapi import FastAPI

from ridequote.api.app import create_app
from ridequote.geo.geocoder import Geocoder
from ridequote.geo.models import RouteOptions
from ridequote.geo.providers import MapboxClient, OpenRouteServiceClient, RoutingProvider
from ridequote.geo.route_resolver import RouteResolver
from ridequote.pricing.aggregator import QuoteAggregator
from ridequote.pricing.surge import SurgePricingModel
from ridequote.quote_logging import setup_logging
from ridequote.settings import Settings, get_settings
from ridequote.trips.search import TripSearchService

logger = logging.getLogger(__name__)


def build_providers(settings: Settings) -> list[RoutingProvider]:
    """Primary vendor first; order defines the fallback chain."""
    routing = settings.routing
    providers: list[RoutingProvider] = [
        OpenRouteServiceClient(
            api_key=settings.ors.api_key,
            base_url=settings.ors.base_url,
            country_code=routing.country_code,
            timeout=routing.timeout_seconds,
        ),
        MapboxClient(
            token=settings.mapbox.token,
            base_url=settings.mapbox.base_url,
            country_code=routing.country_code,
            timeout=routing.timeout_seconds,
        ),
    ]
    if not settings.ors.api_key:
        logger.warning("ORS_API_KEY is not configured; OpenRouteService calls will fail over")
    if not settings.mapbox.token:
        logger.warning("MAPBOX_TOKEN is not configured; Mapbox calls will fail over")
    return providers


def build_app(settings: Settings) -> FastAPI:
    providers = build_providers(settings)
    geocoder = Geocoder(providers, limit=settings.routing.geocode_limit)
    resolver = RouteResolver(
        providers,
        default_options=RouteOptions(
            max_distance_km=settings.routing.max_distance_km,
            min_geometry_points=settings.routing.min_geometry_points,
        ),
    )
    aggregator = QuoteAggregator(surge_model=SurgePricingModel(timezone=settings.quote.timezone))
    trip_search = TripSearchService(
        geocoder, resolver, aggregator, timezone=settings.quote.timezone
    )
    return create_app(
        aggregator,
        geocoder,
        resolver,
        trip_search,
        cors_origins=settings.cors.origins.split(","),
    )


def main() -> None:
    settings = get_settings()
    setup_logging(
        level=settings.quote.log_level,
        json_output=settings.quote.log_format == "json",
    )

    app = build_app(settings)
    port = int(os.getenv("PORT", "8000"))
    logger.info("Starting Ride Quote API on port %d", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level=settings.quote.log_level.lower())


if __name__ == "__main__":
    main()
