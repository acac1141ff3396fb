from .base import HttpRoutingProvider, RoutingProvider
from .mapbox import MapboxClient
from .openrouteservice import OpenRouteServiceClient

__all__ = [
    "HttpRoutingProvider",
    "MapboxClient",
    "OpenRouteServiceClient",
    "RoutingProvider",
]
