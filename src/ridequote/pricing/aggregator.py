import logging
from collections.abc import Sequence

from ridequote.core.exceptions import ValidationError
from ridequote.metrics import record_quote
from ridequote.pricing.fares import FareCalculator, default_calculators
from ridequote.pricing.models import ProviderQuote, TimeContext
from ridequote.pricing.surge import SurgePricingModel

logger = logging.getLogger(__name__)


def _sort_key(quote: ProviderQuote) -> tuple[int, str]:
    # Provider code breaks min fare ties independent of registration order
    return (quote.min_fare, quote.provider.value)


class QuoteAggregator:
    """Runs every fare calculator for a trip and returns quotes cheapest first."""

    def __init__(
        self,
        calculators: Sequence[FareCalculator] | None = None,
        surge_model: SurgePricingModel | None = None,
    ) -> None:
        self.calculators = list(calculators) if calculators is not None else default_calculators()
        if not self.calculators:
            raise ValueError("QuoteAggregator needs at least one fare calculator")
        self.surge_model = surge_model or SurgePricingModel()

    def quote(
        self,
        distance_km: float,
        duration_minutes: float,
        origin_label: str,
        context: TimeContext | None = None,
    ) -> list[ProviderQuote]:
        if distance_km <= 0:
            raise ValidationError(
                "Distance must be positive", details={"distance_km": distance_km}
            )
        if duration_minutes <= 0:
            raise ValidationError(
                "Duration must be positive", details={"duration_minutes": duration_minutes}
            )

        # Every provider prices against the same instant
        if context is None:
            context = self.surge_model.current_context()

        quotes = [
            calculator.quote(
                distance_km,
                duration_minutes,
                origin_label,
                self.surge_model,
                context,
            )
            for calculator in self.calculators
        ]
        quotes.sort(key=_sort_key)

        for quote in quotes:
            record_quote(quote.provider.value, quote.is_surge)

        logger.info(
            "Quoted %d providers for %.1f km / %.1f min from %r, cheapest %s at %d",
            len(quotes),
            distance_km,
            duration_minutes,
            origin_label,
            quotes[0].provider.value,
            quotes[0].min_fare,
        )
        return quotes
