"""
Catalog Service HTTP client.

Fetches the category tree and location hierarchy, and runs the remote
fuzzy location search behind a Circuit Breaker.
"""
import time
from typing import Any, Optional

import httpx
from circuitbreaker import CircuitBreaker, CircuitBreakerError

from internal.domain.catalog import CategoryNode, LocationNode
from internal.domain.errors import (
    CatalogUnavailableError,
    DomainValidationError,
    LocationSearchError,
)
from internal.infrastructure.metrics import FUZZY_SEARCH_DURATION, FUZZY_SEARCH_REQUESTS
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


# Circuit Breaker configuration
FAILURE_THRESHOLD = 5
RECOVERY_TIMEOUT = 60


def _unwrap(payload: Any) -> Any:
    """Accept both bare payloads and ``{"data": ...}`` envelopes."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class CatalogClient:
    """
    HTTP client for the catalog service.

    Endpoints:
        GET categories?includeSubcategories=true
        GET locations/hierarchy
        GET locations/search?q=&limit=
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        search_timeout: float = 2.0,
        failure_threshold: int = FAILURE_THRESHOLD,
        recovery_timeout: int = RECOVERY_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the catalog client.

        Args:
            base_url: Catalog service base URL.
            timeout: Timeout for tree fetches in seconds.
            search_timeout: Timeout for fuzzy search calls in seconds.
            failure_threshold: Failures before the search circuit opens.
            recovery_timeout: Seconds before the search circuit half-opens.
            transport: Optional httpx transport (used by tests).
        """
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )
        self._search_timeout = search_timeout
        self._breaker = CircuitBreaker(
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
            expected_exception=httpx.HTTPError,
            name="catalog-location-search",
        )
        self._guarded_search = self._breaker(self._fetch_search_results)

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        """Circuit breaker guarding the fuzzy search."""
        return self._breaker

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def get_categories_raw(self) -> list[dict]:
        """
        Fetch the category tree payload.

        Raises:
            CatalogUnavailableError: On HTTP or payload errors.
        """
        return await self._get_json(
            "categories",
            resource="categories",
            params={"includeSubcategories": "true"},
        )

    async def get_location_hierarchy_raw(self) -> list[dict]:
        """
        Fetch the nested location hierarchy payload.

        Raises:
            CatalogUnavailableError: On HTTP or payload errors.
        """
        payload = await self._get_json("locations/hierarchy", resource="locations")
        if isinstance(payload, dict):
            # Single root node
            return [payload]
        return payload

    async def get_categories(self) -> list[CategoryNode]:
        """Fetch and parse the category tree."""
        return parse_categories(await self.get_categories_raw())

    async def get_location_hierarchy(self) -> list[LocationNode]:
        """Fetch and parse the location hierarchy."""
        return parse_locations(await self.get_location_hierarchy_raw())

    async def search_locations(self, query: str, limit: int = 5) -> list[LocationNode]:
        """
        Fuzzy search locations by display name.

        Protected by a Circuit Breaker:
        - Opens after 5 consecutive failures
        - Recovers after 60 seconds

        Args:
            query: Display name guess.
            limit: Maximum number of results.

        Returns:
            Matching locations, best first.

        Raises:
            LocationSearchError: On HTTP failure, bad payload or open circuit.
        """
        start_time = time.time()
        try:
            payload = await self._guarded_search(query, limit)
        except CircuitBreakerError as e:
            FUZZY_SEARCH_REQUESTS.labels(status="circuit_open").inc()
            raise LocationSearchError(query, str(e)) from e
        except httpx.HTTPError as e:
            FUZZY_SEARCH_REQUESTS.labels(status="error").inc()
            raise LocationSearchError(query, str(e) or type(e).__name__) from e
        except ValueError as e:
            FUZZY_SEARCH_REQUESTS.labels(status="error").inc()
            raise LocationSearchError(query, "invalid JSON") from e
        finally:
            FUZZY_SEARCH_DURATION.observe(time.time() - start_time)

        try:
            results = [LocationNode.from_dict(item) for item in _unwrap(payload) or []]
        except (KeyError, TypeError, ValueError, DomainValidationError) as e:
            FUZZY_SEARCH_REQUESTS.labels(status="error").inc()
            raise LocationSearchError(query, f"malformed payload: {e}") from e

        FUZZY_SEARCH_REQUESTS.labels(status="success" if results else "empty").inc()
        logger.debug("Location search completed", query=query, results=len(results))
        return results[:limit]

    async def _fetch_search_results(self, query: str, limit: int) -> Any:
        response = await self._client.get(
            "locations/search",
            params={"q": query, "limit": limit},
            timeout=self._search_timeout,
        )
        response.raise_for_status()
        return response.json()

    async def _get_json(
        self,
        path: str,
        resource: str,
        params: Optional[dict] = None,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            payload = _unwrap(response.json())
        except httpx.HTTPError as e:
            logger.error("Catalog fetch failed", resource=resource, error=str(e))
            raise CatalogUnavailableError(resource, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.error("Catalog payload is not JSON", resource=resource, error=str(e))
            raise CatalogUnavailableError(resource, "invalid JSON") from e

        if not isinstance(payload, (list, dict)):
            raise CatalogUnavailableError(resource, "unexpected payload shape")
        return payload


def parse_categories(payload: list[dict]) -> list[CategoryNode]:
    """
    Parse a category tree payload.

    Raises:
        CatalogUnavailableError: If the payload is malformed.
    """
    try:
        return [CategoryNode.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError, DomainValidationError) as e:
        raise CatalogUnavailableError("categories", f"malformed payload: {e}") from e


def parse_locations(payload: list[dict]) -> list[LocationNode]:
    """
    Parse a location hierarchy payload.

    Raises:
        CatalogUnavailableError: If the payload is malformed.
    """
    try:
        return [LocationNode.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError, DomainValidationError) as e:
        raise CatalogUnavailableError("locations", f"malformed payload: {e}") from e
