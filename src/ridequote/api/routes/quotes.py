from fastapi import APIRouter

from ridequote.api.dependencies import AggregatorDep
from ridequote.api.models import QuoteRequest
from ridequote.pricing.models import ProviderQuote

router = APIRouter()


@router.post("", response_model=list[ProviderQuote])
def create_quotes(body: QuoteRequest, aggregator: AggregatorDep) -> list[ProviderQuote]:
    """Price a trip across every provider, cheapest first."""
    return aggregator.quote(
        body.distance_km,
        body.duration_minutes,
        body.origin_label,
        body.context,
    )
