import logging

import pytest

from ridequote.core.exceptions import (
    DataIntegrityWarning,
    ProviderServiceError,
    ProviderTimeoutError,
    RejectionReason,
)
from ridequote.geo.models import RouteOptions, RouteResponse, RouteSource
from ridequote.geo.route_resolver import RouteResolver, normalize_route, round_half_up
from tests.factories import FakeRoutingProvider, route_response, straight_path


@pytest.mark.unit
class TestNormalizeRoute:
    def test_converts_units_with_one_decimal(self):
        response = RouteResponse(
            distance_meters=12345.0, duration_seconds=754.0, geometry=straight_path(6)
        )

        plan = normalize_route(response, RouteSource.PRIMARY, "openrouteservice", RouteOptions())

        assert plan.distance_km == pytest.approx(12.3)
        assert plan.duration_minutes == pytest.approx(12.6)
        assert plan.source == RouteSource.PRIMARY
        assert plan.provider == "openrouteservice"
        assert plan.geometry == straight_path(6)

    def test_too_few_points(self):
        with pytest.raises(DataIntegrityWarning) as exc_info:
            normalize_route(route_response(points=4), RouteSource.PRIMARY, "ors", RouteOptions())

        assert exc_info.value.reason == RejectionReason.INSUFFICIENT_GEOMETRY
        assert exc_info.value.details["geometry_points"] == 4

    def test_exactly_minimum_points_accepted(self):
        plan = normalize_route(route_response(points=5), RouteSource.PRIMARY, "ors", RouteOptions())
        assert len(plan.geometry) == 5

    def test_too_long(self):
        with pytest.raises(DataIntegrityWarning) as exc_info:
            normalize_route(
                route_response(distance_meters=150_000),
                RouteSource.SECONDARY,
                "mapbox",
                RouteOptions(),
            )

        assert exc_info.value.reason == RejectionReason.DISTANCE_OUT_OF_RANGE

    def test_exactly_max_distance_accepted(self):
        plan = normalize_route(
            route_response(distance_meters=100_000), RouteSource.PRIMARY, "ors", RouteOptions()
        )
        assert plan.distance_km == 100.0

    @pytest.mark.parametrize(
        "value,expected", [(12.34, 12.3), (12.36, 12.4), (0.04, 0.0), (7.0, 7.0)]
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == pytest.approx(expected)


@pytest.mark.unit
class TestRouteResolver:
    async def test_valid_primary_is_used_without_secondary(self, makati, bgc):
        primary = FakeRoutingProvider("openrouteservice", route=route_response())
        secondary = FakeRoutingProvider("mapbox", route=route_response())
        resolver = RouteResolver([primary, secondary])

        plan = await resolver.resolve(makati, bgc)

        assert plan is not None
        assert plan.source == RouteSource.PRIMARY
        assert plan.provider == "openrouteservice"
        assert plan.distance_km == 5.0
        assert plan.duration_minutes == 15.0
        assert secondary.route_calls == 0

    async def test_sparse_primary_falls_back_to_secondary(self, makati, bgc, caplog):
        primary = FakeRoutingProvider("openrouteservice", route=route_response(points=3))
        secondary = FakeRoutingProvider(
            "mapbox", route=route_response(points=20, distance_meters=5100)
        )
        resolver = RouteResolver([primary, secondary])

        with caplog.at_level(logging.WARNING, logger="ridequote.geo.route_resolver"):
            plan = await resolver.resolve(makati, bgc)

        assert plan.source == RouteSource.SECONDARY
        assert plan.provider == "mapbox"
        assert plan.distance_km == pytest.approx(5.1)
        assert "insufficient-geometry" in caplog.text

    async def test_out_of_range_primary_falls_back(self, makati, bgc):
        primary = FakeRoutingProvider(
            "openrouteservice", route=route_response(distance_meters=150_000)
        )
        secondary = FakeRoutingProvider("mapbox", route=route_response())

        plan = await RouteResolver([primary, secondary]).resolve(makati, bgc)

        assert plan.source == RouteSource.SECONDARY

    @pytest.mark.parametrize(
        "failure",
        [
            ProviderTimeoutError("timed out", provider="openrouteservice"),
            ProviderServiceError("HTTP 500", provider="openrouteservice"),
        ],
    )
    async def test_primary_failure_falls_back(self, makati, bgc, failure):
        primary = FakeRoutingProvider("openrouteservice", route=failure)
        secondary = FakeRoutingProvider("mapbox", route=route_response())

        plan = await RouteResolver([primary, secondary]).resolve(makati, bgc)

        assert plan.provider == "mapbox"
        assert primary.route_calls == 1

    async def test_all_invalid_returns_none(self, makati, bgc, caplog):
        primary = FakeRoutingProvider("openrouteservice", route=route_response(points=2))
        secondary = FakeRoutingProvider("mapbox", route=route_response(points=4))

        with caplog.at_level(logging.WARNING):
            plan = await RouteResolver([primary, secondary]).resolve(makati, bgc)

        assert plan is None
        assert "All routing providers failed" in caplog.text

    async def test_providers_attempted_once_in_order(self, makati, bgc):
        call_log: list[str] = []
        providers = [
            FakeRoutingProvider("first", call_log=call_log),
            FakeRoutingProvider("second", call_log=call_log),
            FakeRoutingProvider("third", route=route_response(), call_log=call_log),
        ]

        plan = await RouteResolver(providers).resolve(makati, bgc)

        assert call_log == ["first", "second", "third"]
        assert plan.source == RouteSource.SECONDARY
        assert plan.provider == "third"

    async def test_options_override_defaults(self, makati, bgc):
        provider = FakeRoutingProvider("openrouteservice", route=route_response(points=3))
        resolver = RouteResolver([provider])

        assert await resolver.resolve(makati, bgc) is None
        plan = await resolver.resolve(makati, bgc, RouteOptions(min_geometry_points=3))
        assert plan is not None

    async def test_max_distance_option(self, makati, bgc):
        provider = FakeRoutingProvider(
            "openrouteservice", route=route_response(distance_meters=30_000)
        )
        resolver = RouteResolver([provider], default_options=RouteOptions(max_distance_km=25))

        assert await resolver.resolve(makati, bgc) is None

    async def test_timeout_passed_to_provider(self, makati, bgc):
        provider = FakeRoutingProvider("openrouteservice", route=route_response())
        resolver = RouteResolver([provider], timeout=4.0)

        await resolver.resolve(makati, bgc)
        assert provider.last_timeout == 4.0

        await resolver.resolve(makati, bgc, timeout=1.5)
        assert provider.last_timeout == 1.5

    def test_requires_a_provider(self):
        with pytest.raises(ValueError):
            RouteResolver([])
