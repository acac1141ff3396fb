"""Pricing models: providers, time context, surge results and quotes."""

from datetime import datetime
from enum import Enum
from typing import Self
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ridequote.core.exceptions import ConfigurationError


class ProviderCode(str, Enum):
    GRAB_PH = "GrabPH"
    ANGKAS = "Angkas"
    JOYRIDE_MC = "JoyRideMC"


class VehicleCategory(str, Enum):
    FOUR_WHEEL = "4-wheel"
    TWO_WHEEL = "2-wheel"


PROVIDER_LABELS: dict[ProviderCode, str] = {
    ProviderCode.GRAB_PH: "Grab (4-wheel)",
    ProviderCode.ANGKAS: "Angkas (MC Taxi)",
    ProviderCode.JOYRIDE_MC: "JoyRide (MC Taxi)",
}

PROVIDER_CATEGORIES: dict[ProviderCode, VehicleCategory] = {
    ProviderCode.GRAB_PH: VehicleCategory.FOUR_WHEEL,
    ProviderCode.ANGKAS: VehicleCategory.TWO_WHEEL,
    ProviderCode.JOYRIDE_MC: VehicleCategory.TWO_WHEEL,
}


class ProviderProfile(BaseModel):
    """Fixed surge behaviour constants for one provider."""

    model_config = ConfigDict(frozen=True)

    base_probability: float = Field(ge=0.0, le=1.0)
    max_multiplier: float = Field(ge=1.05)
    base_variance: float = Field(ge=0.0)


PROVIDER_PROFILES: dict[ProviderCode, ProviderProfile] = {
    # ~75% of GrabPH trips carry some level of surge
    ProviderCode.GRAB_PH: ProviderProfile(
        base_probability=0.75, max_multiplier=2.0, base_variance=0.1
    ),
    ProviderCode.ANGKAS: ProviderProfile(
        base_probability=0.4, max_multiplier=1.4, base_variance=0.05
    ),
    ProviderCode.JOYRIDE_MC: ProviderProfile(
        base_probability=0.35, max_multiplier=1.35, base_variance=0.05
    ),
}


class TimeContext(BaseModel):
    """Hour of day and day of week (0 = Sunday) a quote is priced at."""

    model_config = ConfigDict(frozen=True)

    hour: int = Field(ge=0, le=23)
    day_of_week: int = Field(ge=0, le=6)

    @classmethod
    def from_datetime(cls, moment: datetime) -> Self:
        # datetime.weekday() is Monday=0; shift so Sunday=0
        return cls(hour=moment.hour, day_of_week=(moment.weekday() + 1) % 7)


def load_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone: {name}", details={"timezone": name}) from e


class TimeSlot(str, Enum):
    RUSH_HOUR = "RUSH_HOUR"
    LATE_NIGHT = "LATE_NIGHT"
    OFF_PEAK = "OFF_PEAK"

    @classmethod
    def from_hour(cls, hour: int) -> "TimeSlot":
        if is_rush_hour(hour):
            return cls.RUSH_HOUR
        if is_late_night(hour):
            return cls.LATE_NIGHT
        return cls.OFF_PEAK


class LocationCategory(str, Enum):
    CBD = "CBD"
    AIRPORT = "AIRPORT"
    RESIDENTIAL = "RESIDENTIAL"


def is_rush_hour(hour: int) -> bool:
    return 7 <= hour <= 9 or 17 <= hour <= 19


def is_late_night(hour: int) -> bool:
    return hour >= 22 or hour < 5


def is_weekday(day_of_week: int) -> bool:
    return 1 <= day_of_week <= 5


class SurgeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_surge: bool
    surge_multiplier: float

    @model_validator(mode="after")
    def check_multiplier_matches_flag(self) -> Self:
        if self.is_surge and self.surge_multiplier < 1.05:
            raise ValueError("Active surge requires a multiplier of at least 1.05")
        if not self.is_surge and self.surge_multiplier != 1.0:
            raise ValueError("Inactive surge must carry a multiplier of exactly 1.0")
        return self


NO_SURGE = SurgeResult(is_surge=False, surge_multiplier=1.0)


class ProviderQuote(BaseModel):
    """One provider's priced, timed offer for a trip."""

    provider: ProviderCode
    provider_name: str
    min_fare: int = Field(ge=0)
    max_fare: int = Field(ge=0)
    eta: int = Field(ge=0, description="Minutes")
    surge_multiplier: float = Field(ge=1.0)
    is_surge: bool
    category: VehicleCategory

    @model_validator(mode="after")
    def check_fare_range(self) -> Self:
        if self.max_fare < self.min_fare:
            raise ValueError(
                f"max_fare ({self.max_fare}) must not be below min_fare ({self.min_fare})"
            )
        return self
