"""Geocoding, routing vendors and route resolution."""

from .geocoder import Geocoder
from .models import Coordinate, PlaceSuggestion, RouteOptions, RoutePlan, RouteSource
from .route_resolver import RouteResolver

__all__ = [
    "Coordinate",
    "Geocoder",
    "PlaceSuggestion",
    "RouteOptions",
    "RoutePlan",
    "RouteResolver",
    "RouteSource",
]
