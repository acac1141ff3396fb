"""Stochastic surge pricing model.

Classifies the request context (rush hour, late night, CBD or airport
origin, weekday) into a deterministic surge score and a trigger
probability, then draws from an injected random source to decide whether
surge applies and at what multiplier.
"""

import logging
import random
from collections.abc import Callable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ridequote.pricing.models import (
    NO_SURGE,
    PROVIDER_CATEGORIES,
    PROVIDER_PROFILES,
    LocationCategory,
    ProviderCode,
    SurgeResult,
    TimeContext,
    VehicleCategory,
    is_late_night,
    is_rush_hour,
    is_weekday,
    load_timezone,
)

logger = logging.getLogger(__name__)

CBD_KEYWORDS = ("makati", "bgc", "bonifacio", "ortigas", "ayala")
AIRPORT_KEYWORDS = ("naia", "airport", "terminal")

SURGE_THRESHOLD = 1.05

# (four-wheel, two-wheel) score weights
RUSH_WEIGHT = (0.55, 0.35)
LATE_NIGHT_WEIGHT = (0.3, 0.2)
OFF_PEAK_WEIGHT = (0.15, 0.05)
CBD_WEIGHT = (0.35, 0.2)
AIRPORT_WEIGHT = (0.5, 0.3)
COMMUTE_BONUS = 0.15

RUSH_PROBABILITY_BOOST = 0.1
LATE_NIGHT_PROBABILITY_BOOST = 0.05
CBD_PROBABILITY_BOOST = 0.05
AIRPORT_PROBABILITY_BOOST = 0.1

PROBABILITY_CAP = {
    VehicleCategory.FOUR_WHEEL: 0.95,
    VehicleCategory.TWO_WHEEL: 0.8,
}


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_multiplier(value: float) -> float:
    """Two decimals, exact ties rounded up (1.125 -> 1.13)."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _matches_keyword(label: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in label for keyword in keywords)


def is_cbd_origin(origin_label: str | None) -> bool:
    return _matches_keyword((origin_label or "").lower(), CBD_KEYWORDS)


def is_airport_origin(origin_label: str | None) -> bool:
    return _matches_keyword((origin_label or "").lower(), AIRPORT_KEYWORDS)


def location_category(origin_label: str | None) -> LocationCategory:
    """Bucket an origin label; airport keywords win over CBD keywords."""
    if is_airport_origin(origin_label):
        return LocationCategory.AIRPORT
    if is_cbd_origin(origin_label):
        return LocationCategory.CBD
    return LocationCategory.RESIDENTIAL


def surge_score(provider: ProviderCode, origin_label: str | None, context: TimeContext) -> float:
    """Deterministic part of the multiplier, before random variance."""
    tier = 0 if PROVIDER_CATEGORIES[provider] == VehicleCategory.FOUR_WHEEL else 1
    rush = is_rush_hour(context.hour)
    cbd = is_cbd_origin(origin_label)
    airport = is_airport_origin(origin_label)

    if rush:
        score = RUSH_WEIGHT[tier]
    elif is_late_night(context.hour):
        score = LATE_NIGHT_WEIGHT[tier]
    else:
        score = OFF_PEAK_WEIGHT[tier]

    if cbd:
        score += CBD_WEIGHT[tier]
    if airport:
        score += AIRPORT_WEIGHT[tier]
    if is_weekday(context.day_of_week) and rush and (cbd or airport):
        score += COMMUTE_BONUS

    return score


def trigger_probability(
    provider: ProviderCode, origin_label: str | None, context: TimeContext
) -> float:
    profile = PROVIDER_PROFILES[provider]
    boost = 0.0
    if is_rush_hour(context.hour):
        boost += RUSH_PROBABILITY_BOOST
    if is_late_night(context.hour):
        boost += LATE_NIGHT_PROBABILITY_BOOST
    if is_cbd_origin(origin_label):
        boost += CBD_PROBABILITY_BOOST
    if is_airport_origin(origin_label):
        boost += AIRPORT_PROBABILITY_BOOST

    cap = PROBABILITY_CAP[PROVIDER_CATEGORIES[provider]]
    return _clamp(profile.base_probability + boost, 0.0, cap)


def compute_surge(
    provider: ProviderCode,
    origin_label: str | None,
    context: TimeContext,
    rng: random.Random,
) -> SurgeResult:
    """Compute a surge result for one provider.

    Surge applies when the tentative multiplier clears the threshold OR an
    independent roll lands under the trigger probability. The roll is only
    drawn when the threshold check fails.
    """
    profile = PROVIDER_PROFILES[provider]
    tentative = 1 + surge_score(provider, origin_label, context)
    tentative += rng.uniform(-profile.base_variance, profile.base_variance)

    should_surge = tentative > SURGE_THRESHOLD or rng.random() < trigger_probability(
        provider, origin_label, context
    )
    if not should_surge:
        return NO_SURGE

    multiplier = _clamp(round_multiplier(tentative), SURGE_THRESHOLD, profile.max_multiplier)
    return SurgeResult(is_surge=True, surge_multiplier=multiplier)


class SurgePricingModel:
    """Boundary object for surge pricing.

    Owns the random source and the clock; the clock is only read when a
    caller does not pass a TimeContext.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        timezone: str = "Asia/Manila",
    ) -> None:
        self.rng = rng or random.Random()
        self._tz = load_timezone(timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))

    def current_context(self) -> TimeContext:
        return TimeContext.from_datetime(self._clock())

    def calculate(
        self,
        provider: ProviderCode,
        origin_label: str | None = None,
        context: TimeContext | None = None,
    ) -> SurgeResult:
        if context is None:
            context = self.current_context()

        result = compute_surge(provider, origin_label, context, self.rng)
        logger.debug(
            "Surge for %s at hour=%d day=%d: surge=%s multiplier=%.2f",
            provider.value,
            context.hour,
            context.day_of_week,
            result.is_surge,
            result.surge_multiplier,
        )
        return result
