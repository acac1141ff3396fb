from typing import Annotated

from fastapi import APIRouter, Query

from ridequote.api.dependencies import GeocoderDep
from ridequote.geo.models import PlaceSuggestion

router = APIRouter()


@router.get("/search", response_model=list[PlaceSuggestion])
async def search_places(
    geocoder: GeocoderDep,
    q: Annotated[str, Query(max_length=200)] = "",
) -> list[PlaceSuggestion]:
    """Ranked place suggestions; a blank query returns no results."""
    if not q.strip():
        return []
    return await geocoder.search(q)
