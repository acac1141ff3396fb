"""OpenRouteService directions and geocoding client (primary vendor)."""

from typing import Any

import httpx

from ridequote.core.exceptions import MalformedResponseError, NoRouteFoundError
from ridequote.geo.geometry import extract_geometry
from ridequote.geo.models import Coordinate, PlaceSuggestion, RouteResponse
from ridequote.geo.providers.base import HttpRoutingProvider

# ORS/Pelias layers mapped onto our place-type vocabulary
LAYER_PLACE_TYPES = {
    "venue": "poi",
    "address": "address",
    "street": "address",
    "neighbourhood": "neighborhood",
    "locality": "locality",
    "localadmin": "place",
    "borough": "district",
    "county": "district",
    "region": "region",
    "macroregion": "region",
}


class OpenRouteServiceClient(HttpRoutingProvider):
    name = "openrouteservice"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openrouteservice.org",
        country_code: str = "PH",
        profile: str = "driving-car",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, client=client)
        self.api_key = api_key
        self.country_code = country_code.upper()
        self.profile = profile

    def _headers(self) -> dict[str, str]:
        return {"Authorization": self.api_key, "Accept": "application/json"}

    async def route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        *,
        timeout: float | None = None,
    ) -> RouteResponse:
        self._require_credential(self.api_key, "ORS_API_KEY")

        data = await self._request_json(
            "POST",
            f"{self.base_url}/v2/directions/{self.profile}",
            timeout=timeout,
            headers=self._headers(),
            json={"coordinates": [origin.as_lng_lat(), destination.as_lng_lat()]},
        )

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            raise NoRouteFoundError("No route found between coordinates", provider=self.name)
        if not isinstance(routes, list):
            raise MalformedResponseError("Directions routes is not a list", provider=self.name)

        try:
            route = routes[0]
            # ORS omits summary fields for zero-length routes
            summary = route.get("summary") or {}
            return RouteResponse(
                distance_meters=float(summary.get("distance", 0.0)),
                duration_seconds=float(summary.get("duration", 0.0)),
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
        self._require_credential(self.api_key, "ORS_API_KEY")

        data = await self._request_json(
            "GET",
            f"{self.base_url}/geocode/search",
            timeout=timeout,
            headers=self._headers(),
            params={
                "text": query,
                "boundary.country": self.country_code,
                "size": limit,
            },
        )

        features = data.get("features", []) if isinstance(data, dict) else []
        return self._collect_suggestions(features, query)

    def _to_suggestion(self, feature: dict[str, Any], query: str) -> PlaceSuggestion | None:
        coordinates = (feature.get("geometry") or {}).get("coordinates") or []
        if len(coordinates) < 2:
            return None
        lng, lat = coordinates[0], coordinates[1]
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            return None

        properties = feature.get("properties") or {}
        label = properties.get("name") or properties.get("label") or query
        return PlaceSuggestion(
            id=str(properties.get("gid") or properties.get("id") or f"{lat},{lng}"),
            label=label,
            address=properties.get("label") or label,
            lat=float(lat),
            lng=float(lng),
            place_type=LAYER_PLACE_TYPES.get(properties.get("layer", ""), "address"),
            relevance=float(properties.get("confidence") or 0.0),
        )
