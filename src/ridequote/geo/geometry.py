"""Route geometry decoding.

Vendors return a path either as GeoJSON-style ``[lng, lat]`` pairs or as an
encoded polyline string (signed zig-zag deltas, precision 1e5).
"""

from typing import Any

import polyline

from ridequote.geo.models import Coordinate

POLYLINE_PRECISION = 5


def decode_polyline(encoded: str, precision: int = POLYLINE_PRECISION) -> list[Coordinate]:
    """Decode polyline string to a list of coordinates."""
    return [Coordinate(lat=lat, lng=lng) for lat, lng in polyline.decode(encoded, precision)]


def encode_polyline(points: list[Coordinate], precision: int = POLYLINE_PRECISION) -> str:
    return polyline.encode([(p.lat, p.lng) for p in points], precision)


def coordinates_from_pairs(pairs: list[list[float]]) -> list[Coordinate]:
    """Convert ``[lng, lat]`` pairs into coordinates."""
    return [Coordinate(lat=float(pair[1]), lng=float(pair[0])) for pair in pairs]


def extract_geometry(raw: Any) -> list[Coordinate]:
    """Normalize a vendor geometry field into coordinates.

    Accepts a GeoJSON geometry object, a bare list of ``[lng, lat]`` pairs,
    or an encoded polyline. The array form wins when both are present.
    Anything else yields an empty path, which validation later rejects.
    """
    if isinstance(raw, dict):
        coordinates = raw.get("coordinates")
        if isinstance(coordinates, list):
            return coordinates_from_pairs(coordinates)
        encoded = raw.get("polyline")
        if isinstance(encoded, str) and encoded:
            return decode_polyline(encoded)
        return []
    if isinstance(raw, list):
        return coordinates_from_pairs(raw)
    if isinstance(raw, str) and raw:
        return decode_polyline(raw)
    return []
