from .repair import RepairSummary, RouteRepairJob, StoredTrip, TripRouteStore
from .search import PlaceInput, TripSearchRequest, TripSearchResult, TripSearchService, TripSink

__all__ = [
    "PlaceInput",
    "RepairSummary",
    "RouteRepairJob",
    "StoredTrip",
    "TripRouteStore",
    "TripSearchRequest",
    "TripSearchResult",
    "TripSearchService",
    "TripSink",
]
