"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from ridequote.geo.geocoder import Geocoder
from ridequote.geo.route_resolver import RouteResolver
from ridequote.pricing.aggregator import QuoteAggregator
from ridequote.trips.search import TripSearchService


def get_aggregator(request: Request) -> QuoteAggregator:
    """Retrieve QuoteAggregator from app state."""
    return request.app.state.aggregator


def get_geocoder(request: Request) -> Geocoder:
    return request.app.state.geocoder


def get_resolver(request: Request) -> RouteResolver:
    return request.app.state.resolver


def get_trip_search(request: Request) -> TripSearchService:
    return request.app.state.trip_search


AggregatorDep = Annotated[QuoteAggregator, Depends(get_aggregator)]
GeocoderDep = Annotated[Geocoder, Depends(get_geocoder)]
ResolverDep = Annotated[RouteResolver, Depends(get_resolver)]
TripSearchDep = Annotated[TripSearchService, Depends(get_trip_search)]
