"""FastAPI application factory for the quote and routing engine."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from ridequote.api.models import HealthResponse
from ridequote.api.routes import places, quotes, routing, trips
from ridequote.core.exceptions import ValidationError
from ridequote.geo.geocoder import Geocoder
from ridequote.geo.route_resolver import RouteResolver
from ridequote.metrics import render_latest
from ridequote.pricing.aggregator import QuoteAggregator
from ridequote.trips.search import TripSearchService

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "details": exc.details},
    )


def create_app(
    aggregator: QuoteAggregator,
    geocoder: Geocoder,
    resolver: RouteResolver,
    trip_search: TripSearchService,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        aggregator: QuoteAggregator used for /quotes and trip search
        geocoder: Geocoder over the routing provider chain
        resolver: RouteResolver over the routing provider chain
        trip_search: TripSearchService wiring the three together
        cors_origins: allowed browser origins (optional)
    """
    app = FastAPI(
        title="Ride Quote API",
        version="0.1.0",
        description="Compare simulated ride-hailing fares and resolve routes",
    )

    # Set dependencies immediately so they're available for testing
    app.state.aggregator = aggregator
    app.state.geocoder = geocoder
    app.state.resolver = resolver
    app.state.trip_search = trip_search

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]

    app.include_router(places.router, prefix="/places", tags=["places"])
    app.include_router(quotes.router, prefix="/quotes", tags=["quotes"])
    app.include_router(routing.router, prefix="/routes", tags=["routes"])
    app.include_router(trips.router, prefix="/trips", tags=["trips"])

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint for monitoring."""
        return HealthResponse(
            status="healthy",
            providers=[provider.name for provider in resolver.providers],
        )

    @app.get("/metrics")
    async def prometheus_metrics() -> Response:
        return Response(content=render_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
