"""
Search Listings Use Case.

Runs compiled SearchFilters against the listing query service.
"""
from dataclasses import dataclass, field
from typing import Any, Protocol

from internal.domain.catalog import SearchFilters
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class ListingSource(Protocol):
    """Listing query service collaborator."""

    async def search_ads(self, filters: SearchFilters) -> dict[str, Any]:
        ...


@dataclass
class SearchListingsOutput:
    """Output for SearchListingsUseCase."""

    ads: list[dict] = field(default_factory=list)
    total: int = 0
    has_more: bool = False
    limit: int = 0
    offset: int = 0

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit

    def to_dict(self) -> dict:
        return {
            "data": self.ads,
            "pagination": {
                "total": self.total,
                "hasMore": self.has_more,
                "limit": self.limit,
                "offset": self.offset,
                "totalPages": self.total_pages,
            },
        }


class SearchListingsUseCase:
    """
    Use case for listing ads matching compiled filters.

    Hierarchical expansion (parent category -> subcategories, location name
    -> descendants) happens in the listing service.
    """

    def __init__(self, listing_source: ListingSource) -> None:
        """
        Initialize the use case.

        Args:
            listing_source: Listing service client.
        """
        self._source = listing_source

    async def execute(self, filters: SearchFilters) -> SearchListingsOutput:
        """
        Execute the listing search.

        Args:
            filters: Compiled search filters.

        Returns:
            Page of ads with pagination info.

        Raises:
            ListingServiceError: If the listing service fails.
        """
        logger.info("Searching listings", filters=filters.to_query_params())

        body = await self._source.search_ads(filters)
        ads = body.get("data") or []
        pagination = body.get("pagination") or {}
        total = int(pagination.get("total") or 0)
        has_more = pagination.get("hasMore")
        if has_more is None:
            has_more = filters.offset + len(ads) < total

        logger.info("Listing search completed", total=total, returned=len(ads))

        return SearchListingsOutput(
            ads=list(ads),
            total=total,
            has_more=bool(has_more),
            limit=filters.limit,
            offset=filters.offset,
        )
