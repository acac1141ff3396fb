"""Per-provider fare calculators.

Each calculator owns a pure pre-surge formula; quoting applies the surge
multiplier with floor/ceil rounding so fares stay whole pesos.
"""

import math
from abc import ABC, abstractmethod

from ridequote.core.exceptions import ValidationError
from ridequote.pricing.models import (
    PROVIDER_CATEGORIES,
    PROVIDER_LABELS,
    ProviderCode,
    ProviderQuote,
    TimeContext,
    VehicleCategory,
)
from ridequote.pricing.surge import SurgePricingModel

MOTO_BASE_FARE = 50
MOTO_BASE_KM = 2
MOTO_MID_TIER_END_KM = 7
MOTO_MID_TIER_RATE = 10
MOTO_LONG_TIER_RATE = 15


def tiered_motorcycle_fare(distance_km: float) -> float:
    """50 flat for the first 2 km, 10/km from 2 to 7 km, 15/km beyond 7 km."""
    mid_km = max(0.0, min(distance_km, MOTO_MID_TIER_END_KM) - MOTO_BASE_KM)
    long_km = max(0.0, distance_km - MOTO_MID_TIER_END_KM)
    return MOTO_BASE_FARE + MOTO_MID_TIER_RATE * mid_km + MOTO_LONG_TIER_RATE * long_km


class FareCalculator(ABC):
    provider: ProviderCode
    spread: float
    eta_factor: float

    @property
    def category(self) -> VehicleCategory:
        return PROVIDER_CATEGORIES[self.provider]

    @abstractmethod
    def pre_surge_fare(self, distance_km: float, duration_minutes: float) -> float:
        """Fare before the surge multiplier is applied."""

    def quote(
        self,
        distance_km: float,
        duration_minutes: float,
        origin_label: str | None,
        surge_model: SurgePricingModel,
        context: TimeContext | None = None,
    ) -> ProviderQuote:
        if distance_km < 0:
            raise ValidationError(
                "Distance cannot be negative", details={"distance_km": distance_km}
            )
        if duration_minutes < 0:
            raise ValidationError(
                "Duration cannot be negative", details={"duration_minutes": duration_minutes}
            )

        surge = surge_model.calculate(self.provider, origin_label, context)
        fare = self.pre_surge_fare(distance_km, duration_minutes)

        min_fare = math.floor(fare * surge.surge_multiplier)
        max_fare = math.ceil(min_fare * self.spread)

        return ProviderQuote(
            provider=self.provider,
            provider_name=PROVIDER_LABELS[self.provider],
            min_fare=min_fare,
            max_fare=max_fare,
            eta=math.ceil(duration_minutes * self.eta_factor),
            surge_multiplier=surge.surge_multiplier,
            is_surge=surge.is_surge,
            category=self.category,
        )


class GrabPHFareCalculator(FareCalculator):
    provider = ProviderCode.GRAB_PH
    spread = 1.10
    eta_factor = 1.0

    BASE_FARE = 45
    PER_KM = 15
    PER_MINUTE = 2

    def pre_surge_fare(self, distance_km: float, duration_minutes: float) -> float:
        return self.BASE_FARE + self.PER_KM * distance_km + self.PER_MINUTE * duration_minutes


class AngkasFareCalculator(FareCalculator):
    provider = ProviderCode.ANGKAS
    spread = 1.05
    eta_factor = 0.70

    def pre_surge_fare(self, distance_km: float, duration_minutes: float) -> float:
        return tiered_motorcycle_fare(distance_km)


class JoyRideFareCalculator(FareCalculator):
    provider = ProviderCode.JOYRIDE_MC
    spread = 1.05
    eta_factor = 0.75

    def pre_surge_fare(self, distance_km: float, duration_minutes: float) -> float:
        return tiered_motorcycle_fare(distance_km)


def default_calculators() -> list[FareCalculator]:
    return [GrabPHFareCalculator(), AngkasFareCalculator(), JoyRideFareCalculator()]
