"""Standardized exception hierarchy for the quote and routing engine."""

from enum import Enum
from typing import Any


class RejectionReason(str, Enum):
    """Why a provider's route was not accepted."""

    INSUFFICIENT_GEOMETRY = "insufficient-geometry"
    DISTANCE_OUT_OF_RANGE = "distance-out-of-range"
    PROVIDER_FAILURE = "provider-failure"


class RideQuoteError(Exception):
    """Base exception for all quote engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProviderFailure(RideQuoteError):
    """A routing/geocoding vendor could not serve the request.

    Always recovered by moving to the next provider in the chain.
    """

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.provider = provider


class ProviderTimeoutError(ProviderFailure):
    """Vendor request timed out."""

    pass


class ProviderServiceError(ProviderFailure):
    """Vendor returned a non-2xx response or the connection failed."""

    pass


class NoRouteFoundError(ProviderFailure):
    """Vendor answered but had no route between the coordinates."""

    pass


class MalformedResponseError(ProviderFailure):
    """Vendor payload is missing fields we rely on."""

    pass


class DataIntegrityWarning(RideQuoteError):
    """Vendor responded but the route failed validation.

    Handled exactly like a ProviderFailure by the fallback chain.
    """

    def __init__(
        self,
        reason: RejectionReason,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message or reason.value, details)
        self.reason = reason


class PermanentError(RideQuoteError):
    """Errors that will not succeed on retry."""

    pass


class ValidationError(PermanentError):
    """Invalid input (malformed coordinates, empty query, negative distance)."""

    pass


class ConfigurationError(PermanentError):
    """Missing or invalid configuration."""

    pass
