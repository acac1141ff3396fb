"""Mapbox directions and geocoding client (secondary vendor)."""

from typing import Any
from urllib.parse import quote

import httpx

from ridequote.core.exceptions import MalformedResponseError, NoRouteFoundError
from ridequote.geo.geometry import extract_geometry
from ridequote.geo.models import Coordinate, PlaceSuggestion, RouteResponse
from ridequote.geo.providers.base import HttpRoutingProvider

GEOCODE_TYPES = "poi,place,locality,neighborhood,district,region,address"


class MapboxClient(HttpRoutingProvider):
    name = "mapbox"

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.mapbox.com",
        country_code: str = "PH",
        profile: str = "driving",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, client=client)
        self.token = token
        self.country_code = country_code.lower()
        self.profile = profile

    async def route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        *,
        timeout: float | None = None,
    ) -> RouteResponse:
        self._require_credential(self.token, "MAPBOX_TOKEN")

        url = (
            f"{self.base_url}/directions/v5/mapbox/{self.profile}/"
            f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        )
        data = await self._request_json(
            "GET",
            url,
            timeout=timeout,
            params={
                "geometries": "geojson",
                "overview": "full",
                "access_token": self.token,
            },
        )

        if not isinstance(data, dict) or data.get("code") == "NoRoute" or not data.get("routes"):
            raise NoRouteFoundError("No route found between coordinates", provider=self.name)
        if not isinstance(data["routes"], list):
            raise MalformedResponseError("Directions routes is not a list", provider=self.name)

        try:
            route = data["routes"][0]
            return RouteResponse(
                distance_meters=float(route["distance"]),
                duration_seconds=float(route["duration"]),
                geometry=extract_geometry(route.get("geometry")),
            )
        except (KeyError, TypeError, ValueError, IndexError, AttributeError) as e:
            raise MalformedResponseError(
                f"Unexpected directions payload: {e}", provider=self.name
            ) from e

    async def geocode(
        self,
        query: str,
        *,
        limit: int = 5,
        timeout: float | None = None,
    ) -> list[PlaceSuggestion]:
        self._require_credential(self.token, "MAPBOX_TOKEN")

        data = await self._request_json(
            "GET",
            f"{self.base_url}/geocoding/v5/mapbox.places/{quote(query, safe='')}.json",
            timeout=timeout,
            params={
                "access_token": self.token,
                "country": self.country_code,
                "limit": limit,
                "autocomplete": "true",
                "types": GEOCODE_TYPES,
            },
        )

        features = data.get("features", []) if isinstance(data, dict) else []
        return self._collect_suggestions(features, query)

    def _to_suggestion(self, feature: dict[str, Any], query: str) -> PlaceSuggestion | None:
        center = feature.get("center") or []
        if len(center) < 2:
            return None
        lng, lat = center[0], center[1]
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            return None

        properties = feature.get("properties") or {}
        place_types = feature.get("place_type") or ["address"]
        place_type = "landmark" if properties.get("landmark") else place_types[0]

        label = feature.get("text") or feature.get("place_name") or query
        return PlaceSuggestion(
            id=str(feature.get("id") or f"{lat},{lng}"),
            label=label,
            address=feature.get("place_name") or label,
            lat=float(lat),
            lng=float(lng),
            place_type=place_type,
            relevance=float(feature.get("relevance") or 0.0),
        )
