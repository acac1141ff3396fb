"""Routing capability interface and shared HTTP plumbing for vendor clients."""

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from ridequote.core.exceptions import (
    MalformedResponseError,
    ProviderServiceError,
    ProviderTimeoutError,
)
from ridequote.geo.models import Coordinate, PlaceSuggestion, RouteResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class RoutingProvider(Protocol):
    """A vendor that can both geocode free text and route between two points.

    Implementations raise ProviderFailure subclasses for every vendor-side
    problem; callers treat any of them as "try the next provider".
    """

    name: str

    async def route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        *,
        timeout: float | None = None,
    ) -> RouteResponse: ...

    async def geocode(
        self,
        query: str,
        *,
        limit: int = 5,
        timeout: float | None = None,
    ) -> list[PlaceSuggestion]: ...


class HttpRoutingProvider:
    """Shared request/response handling for JSON HTTP vendors.

    A caller may inject an ``httpx.AsyncClient`` (connection reuse, tests);
    otherwise each request opens a short-lived client.
    """

    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> Any:
        effective_timeout = timeout if timeout is not None else self.timeout
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, timeout=effective_timeout, **kwargs
                )
            else:
                async with httpx.AsyncClient(timeout=effective_timeout) as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"Request timed out after {effective_timeout}s", provider=self.name
            ) from e
        except httpx.HTTPError as e:
            raise ProviderServiceError(f"Network error: {e}", provider=self.name) from e

        if not response.is_success:
            raise ProviderServiceError(
                f"{self.name} responded with HTTP {response.status_code}",
                provider=self.name,
                details={"status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"{self.name} returned a non-JSON body", provider=self.name
            ) from e

    def _collect_suggestions(self, features: Any, query: str) -> list[PlaceSuggestion]:
        """Convert vendor features, skipping any that are malformed."""
        if not isinstance(features, list):
            raise MalformedResponseError(
                f"{self.name} returned a non-list feature collection", provider=self.name
            )

        suggestions = []
        for feature in features:
            try:
                suggestion = self._to_suggestion(feature, query)
            except (KeyError, TypeError, ValueError, AttributeError, IndexError) as e:
                logger.warning("Skipping malformed %s feature: %s", self.name, e)
                continue
            if suggestion is not None:
                suggestions.append(suggestion)
        return suggestions

    def _to_suggestion(self, feature: Any, query: str) -> PlaceSuggestion | None:
        raise NotImplementedError

    def _require_credential(self, credential: str, env_var: str) -> None:
        if not credential:
            raise ProviderServiceError(
                f"{env_var} is not configured; {self.name} is unavailable",
                provider=self.name,
            )
