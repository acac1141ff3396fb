"""Surge pricing, fare calculators and quote aggregation."""

from .aggregator import QuoteAggregator
from .fares import (
    AngkasFareCalculator,
    FareCalculator,
    GrabPHFareCalculator,
    JoyRideFareCalculator,
)
from .models import ProviderCode, ProviderQuote, SurgeResult, TimeContext
from .surge import SurgePricingModel, compute_surge

__all__ = [
    "AngkasFareCalculator",
    "FareCalculator",
    "GrabPHFareCalculator",
    "JoyRideFareCalculator",
    "ProviderCode",
    "ProviderQuote",
    "QuoteAggregator",
    "SurgePricingModel",
    "SurgeResult",
    "TimeContext",
    "compute_surge",
]
