"""
Listing Query Service HTTP client.

Sends compiled SearchFilters to ``GET ads`` and returns the raw page.
"""
from typing import Any, Optional

import httpx

from internal.domain.catalog import SearchFilters
from internal.domain.errors import ListingServiceError
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class ListingClient:
    """HTTP client for the listing query service."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the listing client.

        Args:
            base_url: Listing service base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def search_ads(self, filters: SearchFilters) -> dict[str, Any]:
        """
        Query ads with the given filters.

        Args:
            filters: Compiled search filters.

        Returns:
            Response body ``{"data": [...], "pagination": {...}}``.

        Raises:
            ListingServiceError: On HTTP or payload errors.
        """
        params = filters.to_query_params()
        try:
            response = await self._client.get("ads", params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Listing service returned error",
                status_code=e.response.status_code,
                params=params,
            )
            raise ListingServiceError(str(e), status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error("Listing service unreachable", error=str(e), params=params)
            raise ListingServiceError(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ListingServiceError("invalid JSON") from e

        if not isinstance(body, dict):
            raise ListingServiceError("unexpected payload shape")
        return body
