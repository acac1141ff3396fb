from fastapi import APIRouter

from ridequote.api.dependencies import TripSearchDep
from ridequote.trips.search import TripSearchRequest, TripSearchResult

router = APIRouter()


@router.post("/search", response_model=TripSearchResult)
async def search_trip(body: TripSearchRequest, trip_search: TripSearchDep) -> TripSearchResult:
    """Geocode, route and price a trip in one call."""
    return await trip_search.search(body)
