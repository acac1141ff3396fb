import os

# Vendor credentials are supplied out-of-band; provide test values so
# Settings() and the HTTP clients can be constructed in tests.
os.environ.setdefault("ORS_API_KEY", "test-ors-key")
os.environ.setdefault("MAPBOX_TOKEN", "test-mapbox-token")

import random

import pytest

from ridequote.geo.models import Coordinate
from ridequote.pricing.models import TimeContext


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible surge draws."""
    return random.Random(42)


@pytest.fixture
def off_peak_weekday() -> TimeContext:
    # Wednesday 1 PM
    return TimeContext(hour=13, day_of_week=3)


@pytest.fixture
def morning_rush_weekday() -> TimeContext:
    # Tuesday 8 AM
    return TimeContext(hour=8, day_of_week=2)


@pytest.fixture
def makati() -> Coordinate:
    return Coordinate(lat=14.5547, lng=121.0244)


@pytest.fixture
def bgc() -> Coordinate:
    # Roughly 5 km south-east of central Makati
    return Coordinate(lat=14.5176, lng=121.0509)
