"""Distance helpers and last-resort trip estimates.

The estimates here are used only when every routing provider has failed;
they are not part of the route resolver's contract.
"""

import random
from math import atan2, cos, radians, sin, sqrt

from ridequote.geo.models import Coordinate

EARTH_RADIUS_M = 6_371_000  # Earth radius in meters

MIN_ESTIMATED_DISTANCE_KM = 1.5
MIN_ESTIMATED_DURATION_MINUTES = 5
AVERAGE_SPEED_KPH = 25


def haversine_distance_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate the great-circle distance between two points in meters.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees

    Returns:
        Distance between the two points in meters
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


def straight_line_distance_km(origin: Coordinate, destination: Coordinate) -> float:
    return haversine_distance_m(origin.lat, origin.lng, destination.lat, destination.lng) / 1000.0


def estimate_distance_km(
    origin_label: str,
    destination_label: str,
    rng: random.Random | None = None,
) -> float:
    """Rough distance from label lengths with +/-30% jitter, floored at 1.5 km."""
    rng = rng or random.Random()
    base = (len(origin_label) + len(destination_label)) / 5
    variance = rng.uniform(0.7, 1.3)
    return max(MIN_ESTIMATED_DISTANCE_KM, round(base * variance, 1))


def estimate_duration_minutes(distance_km: float) -> int:
    """Duration at an average urban speed, never below five minutes."""
    duration = (distance_km / AVERAGE_SPEED_KPH) * 60
    return max(MIN_ESTIMATED_DURATION_MINUTES, round(duration))
