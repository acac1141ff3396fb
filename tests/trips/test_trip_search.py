from datetime import datetime

import pytest

from ridequote.core.exceptions import ValidationError
from ridequote.geo.geocoder import Geocoder
from ridequote.geo.route_resolver import RouteResolver
from ridequote.pricing.aggregator import QuoteAggregator
from ridequote.pricing.models import ProviderCode, TimeContext
from ridequote.quote_logging import get_current_correlation_id
from ridequote.trips.search import (
    PlaceInput,
    TripSearchRequest,
    TripSearchResult,
    TripSearchService,
)
from tests.factories import (
    FakeRoutingProvider,
    FixedSurgeModel,
    ScriptedRandom,
    place,
    route_response,
)

MONDAY_8AM = datetime(2025, 1, 6, 8, 0)


class RecordingSink:
    def __init__(self):
        self.saved: list[TripSearchResult] = []
        self.correlation_ids: list[str | None] = []

    async def save(self, result: TripSearchResult) -> None:
        self.saved.append(result)
        self.correlation_ids.append(get_current_correlation_id())


def make_service(provider, surge_model=None, sink=None, rng=None) -> TripSearchService:
    providers = [provider]
    return TripSearchService(
        Geocoder(providers),
        RouteResolver(providers),
        QuoteAggregator(surge_model=surge_model or FixedSurgeModel()),
        sink=sink,
        clock=lambda: MONDAY_8AM,
        rng=rng or ScriptedRandom(uniform_value=1.0),
    )


def request_between(origin: PlaceInput, destination: PlaceInput) -> TripSearchRequest:
    return TripSearchRequest(origin=origin, destination=destination)


@pytest.fixture
def makati_input(makati) -> PlaceInput:
    return PlaceInput(label="Makati", lat=makati.lat, lng=makati.lng)


@pytest.fixture
def bgc_input(bgc) -> PlaceInput:
    return PlaceInput(label="BGC", lat=bgc.lat, lng=bgc.lng)


@pytest.mark.unit
class TestTripSearch:
    async def test_known_coordinates_use_routed_distance(self, makati_input, bgc_input):
        provider = FakeRoutingProvider("openrouteservice", route=route_response())
        sink = RecordingSink()

        result = await make_service(provider, sink=sink).search(
            request_between(makati_input, bgc_input)
        )

        assert result.route_source == "PRIMARY"
        assert result.used_fallback is False
        assert result.distance_km == 5.0
        assert result.duration_minutes == 15.0
        assert len(result.route_geometry) == 10
        assert provider.geocode_calls == 0
        assert [q.provider for q in result.quotes] == [
            ProviderCode.ANGKAS,
            ProviderCode.JOYRIDE_MC,
            ProviderCode.GRAB_PH,
        ]
        assert sink.saved == [result]

    async def test_geocoded_endpoint_takes_match_label(self, makati_input):
        provider = FakeRoutingProvider(
            "openrouteservice",
            route=route_response(),
            places=[place("Greenbelt 5", "poi", lat=14.5526, lng=121.0216)],
        )

        result = await make_service(provider).search(
            request_between(makati_input, PlaceInput(label="greenbelt"))
        )

        assert result.origin_label == "Makati"
        assert result.destination_label == "Greenbelt 5"
        assert result.destination_location.lat == 14.5526
        assert provider.geocode_calls == 1
        assert provider.route_calls == 1

    async def test_very_short_route_still_priced(self, makati_input, bgc_input):
        provider = FakeRoutingProvider(
            "openrouteservice",
            route=route_response(points=6, distance_meters=40, duration_seconds=2),
        )

        result = await make_service(provider).search(request_between(makati_input, bgc_input))

        assert result.route_source == "PRIMARY"
        assert result.distance_km == pytest.approx(0.1)
        assert result.duration_minutes == pytest.approx(1.0)
        assert len(result.quotes) == 3
        assert all(q.min_fare > 0 for q in result.quotes)

    async def test_unroutable_known_points_use_straight_line(self, makati_input, bgc_input):
        provider = FakeRoutingProvider("openrouteservice", route=route_response(points=2))

        result = await make_service(provider).search(request_between(makati_input, bgc_input))

        assert result.route_source == "ESTIMATE"
        assert result.used_fallback is True
        assert result.route_geometry == []
        assert result.distance_km == pytest.approx(5.0)
        assert result.duration_minutes == 12

    async def test_unknown_places_use_label_estimate(self):
        provider = FakeRoutingProvider("openrouteservice", places=[])

        result = await make_service(provider).search(
            request_between(PlaceInput(label="Greenhills"), PlaceInput(label="Eastwood Avenue"))
        )

        assert result.route_source == "ESTIMATE"
        assert result.distance_km == pytest.approx(5.0)
        assert result.duration_minutes == 12
        assert result.origin_location is None
        assert provider.route_calls == 0

    async def test_estimate_never_below_minimums(self):
        provider = FakeRoutingProvider("openrouteservice", places=[])

        result = await make_service(provider, rng=ScriptedRandom(uniform_value=0.7)).search(
            request_between(PlaceInput(label="A"), PlaceInput(label="B"))
        )

        assert result.distance_km == 1.5
        assert result.duration_minutes == 5

    async def test_prices_with_clock_context(self, makati_input, bgc_input):
        surge_model = FixedSurgeModel()
        provider = FakeRoutingProvider("openrouteservice", route=route_response())

        result = await make_service(provider, surge_model=surge_model).search(
            request_between(makati_input, bgc_input)
        )

        assert result.created_at == MONDAY_8AM
        assert surge_model.context_reads == 0
        assert {context for _, _, context in surge_model.calls} == {
            TimeContext(hour=8, day_of_week=1)
        }
        assert {label for _, label, _ in surge_model.calls} == {"Makati"}

    @pytest.mark.parametrize("origin_label,destination_label", [("", "BGC"), ("Makati", "  ")])
    async def test_blank_labels_rejected(self, origin_label, destination_label):
        provider = FakeRoutingProvider("openrouteservice", route=route_response())

        with pytest.raises(ValidationError):
            await make_service(provider).search(
                request_between(PlaceInput(label=origin_label), PlaceInput(label=destination_label))
            )

        assert provider.call_log == []

    async def test_sink_runs_under_trip_correlation(self, makati_input, bgc_input):
        sink = RecordingSink()
        provider = FakeRoutingProvider("openrouteservice", route=route_response())

        result = await make_service(provider, sink=sink).search(
            request_between(makati_input, bgc_input)
        )

        assert sink.correlation_ids == [result.trip_id]
        assert get_current_correlation_id() is None

    async def test_malformed_coordinates_rejected(self, bgc_input):
        provider = FakeRoutingProvider("openrouteservice", route=route_response())

        with pytest.raises(ValidationError):
            await make_service(provider).search(
                request_between(PlaceInput(label="Nowhere", lat=95.0, lng=121.0), bgc_input)
            )
