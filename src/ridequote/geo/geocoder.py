"""Free-text place search over the routing provider chain."""

import logging
from collections.abc import Sequence

from ridequote.core.exceptions import ProviderFailure, ValidationError
from ridequote.geo.models import PlaceSuggestion
from ridequote.geo.providers.base import RoutingProvider
from ridequote.metrics import record_geocode

logger = logging.getLogger(__name__)

PLACE_TYPE_PRIORITY = (
    "landmark",
    "poi",
    "place",
    "locality",
    "neighborhood",
    "district",
    "region",
    "address",
)
_PRIORITY_INDEX = {place_type: rank for rank, place_type in enumerate(PLACE_TYPE_PRIORITY)}


def _rank_key(suggestion: PlaceSuggestion) -> tuple[int, float, str]:
    return (
        _PRIORITY_INDEX.get(suggestion.place_type, len(PLACE_TYPE_PRIORITY)),
        -suggestion.relevance,
        suggestion.label,
    )


def rank_suggestions(suggestions: Sequence[PlaceSuggestion]) -> list[PlaceSuggestion]:
    """Order by place type priority, then relevance (desc), then label."""
    return sorted(suggestions, key=_rank_key)


class Geocoder:
    def __init__(
        self,
        providers: Sequence[RoutingProvider],
        limit: int = 5,
        timeout: float | None = None,
    ) -> None:
        if not providers:
            raise ValueError("Geocoder needs at least one provider")
        self.providers = list(providers)
        self.limit = limit
        self.timeout = timeout

    async def search(self, query: str, *, limit: int | None = None) -> list[PlaceSuggestion]:
        """Return ranked suggestions from the first provider that has any."""
        trimmed = (query or "").strip()
        if not trimmed:
            raise ValidationError("Search query must not be empty")
        if limit is None:
            limit = self.limit
        if limit < 1:
            raise ValidationError("Result limit must be at least 1", details={"limit": limit})

        for provider in self.providers:
            try:
                suggestions = await provider.geocode(trimmed, limit=limit, timeout=self.timeout)
            except ProviderFailure as e:
                record_geocode(provider.name, "failure")
                logger.warning("%s geocoding failed for %r: %s", provider.name, trimmed, e.message)
                continue

            if not suggestions:
                record_geocode(provider.name, "empty")
                logger.info("%s returned no results for %r", provider.name, trimmed)
                continue

            record_geocode(provider.name, "ok")
            return rank_suggestions(suggestions)[:limit]

        logger.warning("No geocoding results for %r", trimmed)
        return []

    async def resolve(self, query: str) -> PlaceSuggestion | None:
        """Best single match for a free-text place, or None."""
        suggestions = await self.search(query)
        return suggestions[0] if suggestions else None
