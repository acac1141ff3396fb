"""Prometheus metrics for quoting, routing and geocoding."""

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

# Use a separate registry to avoid default Python metrics
REGISTRY = CollectorRegistry()

routing_attempts = Counter(
    "ridequote_routing_attempts_total",
    "Directions requests per provider, labelled by outcome",
    ["provider", "outcome"],
    registry=REGISTRY,
)

routing_latency = Histogram(
    "ridequote_routing_latency_seconds",
    "Directions request latency per provider",
    ["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

geocode_requests = Counter(
    "ridequote_geocode_requests_total",
    "Geocoding requests per provider, labelled by outcome",
    ["provider", "outcome"],
    registry=REGISTRY,
)

quotes_issued = Counter(
    "ridequote_quotes_total",
    "Provider quotes issued, labelled by whether surge applied",
    ["provider", "surge"],
    registry=REGISTRY,
)


def record_routing_attempt(provider: str, outcome: str, latency_seconds: float) -> None:
    routing_attempts.labels(provider=provider, outcome=outcome).inc()
    routing_latency.labels(provider=provider).observe(latency_seconds)


def record_geocode(provider: str, outcome: str) -> None:
    geocode_requests.labels(provider=provider, outcome=outcome).inc()


def record_quote(provider: str, is_surge: bool) -> None:
    quotes_issued.labels(provider=provider, surge=str(is_surge).lower()).inc()


def render_latest() -> bytes:
    """Render all metrics in Prometheus text exposition format."""
    return generate_latest(REGISTRY)
