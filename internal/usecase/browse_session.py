"""
Browse Session.

Runs the browse pipeline for one navigating client:

    path -> PathSegments -> ResolvedContext -> SearchFilters -> listings

Every navigation is stamped with a sequence number; a result that
completes after a newer navigation started is discarded, never applied.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from internal.domain.catalog import DEFAULT_PAGE_SIZE, PathSegments, SearchFilters
from internal.infrastructure.metrics import STALE_RESOLUTIONS_DISCARDED
from internal.usecase.browse_url import parse_browse_path
from internal.usecase.build_filters import BuildFiltersInput, build_search_filters
from internal.usecase.catalog_loader import CatalogLoader
from internal.usecase.resolve_context import (
    ResolveContextInput,
    ResolveContextOutput,
    ResolveContextUseCase,
)
from internal.usecase.search_listings import SearchListingsOutput, SearchListingsUseCase
from internal.usecase.seo import (
    Breadcrumb,
    build_breadcrumbs,
    build_meta_description,
    build_meta_title,
)
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


@dataclass
class BrowseQuery:
    """Query string parameters of a browse page."""

    min_price: Optional[str] = None
    max_price: Optional[str] = None
    condition: Optional[str] = None
    sort_by: Optional[str] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class BrowseResult:
    """Everything a browse page needs, derived from one navigation."""

    sequence: int
    segments: PathSegments
    resolution: ResolveContextOutput
    filters: SearchFilters
    breadcrumbs: list[Breadcrumb] = field(default_factory=list)
    meta_title: str = ""
    meta_description: str = ""
    listings: Optional[SearchListingsOutput] = None


class BrowseSession:
    """
    Latest-navigation-wins coordinator for a single client.

    ``resolve`` and ``browse`` return None for superseded attempts.
    """

    def __init__(
        self,
        loader: CatalogLoader,
        resolver: ResolveContextUseCase,
        listings: Optional[SearchListingsUseCase] = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            loader: Shared catalog loader owning the hierarchy index.
            resolver: Segment resolver.
            listings: Listing search use case (optional).
        """
        self._loader = loader
        self._resolver = resolver
        self._listings = listings
        self._sequence = 0

    @property
    def latest_sequence(self) -> int:
        """Sequence number of the newest navigation."""
        return self._sequence

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def is_current(self, sequence: int) -> bool:
        return sequence == self._sequence

    def _discard(self, sequence: int, step: str) -> None:
        STALE_RESOLUTIONS_DISCARDED.inc()
        logger.info(
            "Discarding stale navigation result",
            sequence=sequence,
            latest=self._sequence,
            step=step,
        )

    async def resolve(self, segments: PathSegments) -> Optional[ResolveContextOutput]:
        """
        Resolve segments, deferring until the hierarchy index is built.

        Args:
            segments: Raw path segments.

        Returns:
            Resolution output, or None if a newer navigation started.

        Raises:
            CatalogUnavailableError: If the catalog cannot be loaded.
        """
        sequence = self._next_sequence()
        return await self._resolve_stamped(sequence, segments)

    async def _resolve_stamped(
        self, sequence: int, segments: PathSegments
    ) -> Optional[ResolveContextOutput]:
        index = await self._loader.ensure_index()
        if not self.is_current(sequence):
            self._discard(sequence, "index")
            return None

        output = await self._resolver.execute(
            ResolveContextInput(segments=segments, index=index)
        )
        if not self.is_current(sequence):
            self._discard(sequence, "resolve")
            return None
        return output

    async def browse(
        self,
        path: str,
        query: Optional[BrowseQuery] = None,
        include_listings: bool = True,
    ) -> Optional[BrowseResult]:
        """
        Run the full browse pipeline for a URL path.

        Args:
            path: Browse URL path, e.g. "/ads/thamel/mobile".
            query: Query string parameters.
            include_listings: Whether to call the listing service.

        Returns:
            BrowseResult, or None if a newer navigation started.

        Raises:
            CatalogUnavailableError: If the catalog cannot be loaded.
            ListingServiceError: If the listing service fails.
        """
        query = query or BrowseQuery()
        sequence = self._next_sequence()
        segments = parse_browse_path(path)

        resolution = await self._resolve_stamped(sequence, segments)
        if resolution is None:
            return None

        filters = build_search_filters(
            BuildFiltersInput(
                context=resolution.context,
                unresolved_category_text=resolution.unresolved_category_text,
                min_price=query.min_price,
                max_price=query.max_price,
                condition=query.condition,
                sort_by=query.sort_by,
                page=query.page,
                page_size=query.page_size,
            )
        )

        listings: Optional[SearchListingsOutput] = None
        if include_listings and self._listings is not None:
            listings = await self._listings.execute(filters)
            if not self.is_current(sequence):
                self._discard(sequence, "listings")
                return None

        context = resolution.context
        return BrowseResult(
            sequence=sequence,
            segments=segments,
            resolution=resolution,
            filters=filters,
            breadcrumbs=build_breadcrumbs(context),
            meta_title=build_meta_title(context),
            meta_description=build_meta_description(
                context, count=listings.total if listings else None
            ),
            listings=listings,
        )


class BrowseSessionRegistry:
    """
    Bounded registry of browse sessions keyed by client session ID.

    Least recently used sessions are evicted once ``max_sessions`` is hit.
    """

    def __init__(
        self,
        loader: CatalogLoader,
        resolver: ResolveContextUseCase,
        listings: Optional[SearchListingsUseCase] = None,
        max_sessions: int = 10000,
    ) -> None:
        self._loader = loader
        self._resolver = resolver
        self._listings = listings
        self._max_sessions = max_sessions
        self._sessions: "OrderedDict[str, BrowseSession]" = OrderedDict()

    @property
    def loader(self) -> CatalogLoader:
        return self._loader

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: Optional[str]) -> BrowseSession:
        """
        Get or create the session for a client.

        Anonymous callers get a fresh, unshared session.
        """
        if not session_id:
            return BrowseSession(self._loader, self._resolver, self._listings)

        session = self._sessions.get(session_id)
        if session is None:
            session = BrowseSession(self._loader, self._resolver, self._listings)
            self._sessions[session_id] = session
            while len(self._sessions) > self._max_sessions:
                self._sessions.popitem(last=False)
        else:
            self._sessions.move_to_end(session_id)
        return session
