"""
Resolve Context Use Case.

Resolves raw browse URL segments to catalog entities through a fixed,
prioritised cascade of resolution stages.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from internal.domain.catalog import (
    CategoryNode,
    LocationNode,
    PathSegments,
    ResolutionWarning,
    ResolvedContext,
)
from internal.domain.errors import LocationSearchError
from internal.infrastructure.metrics import RESOLUTION_STAGE_OUTCOMES
from internal.usecase.hierarchy_index import HierarchyIndex
from internal.usecase.matchers import (
    CATEGORY_STRATEGIES,
    EXACT_SLUG,
    LOCATION_STRATEGIES,
    find_first,
)
from pkg.logger.logger import get_logger
from pkg.slug.codec import from_slug_guess, to_slug


logger = get_logger(__name__)


# Maximum number of remote fuzzy search results to consider
FUZZY_SEARCH_LIMIT = 5


class LocationSearcher(Protocol):
    """Remote fuzzy location search collaborator."""

    async def search_locations(self, query: str, limit: int = FUZZY_SEARCH_LIMIT) -> list[LocationNode]:
        ...


class ResolutionStage(str, Enum):
    """Resolution stages, named for what they resolve."""

    SUBCATEGORY = "subcategory"
    CATEGORY = "category"
    LOCATION = "location"
    LOCATION_AS_CATEGORY = "location_as_category"


# Subcategories win over parents sharing their name; a location segment is
# read as a category only after every location lookup missed.
RESOLUTION_ORDER: tuple[ResolutionStage, ...] = (
    ResolutionStage.SUBCATEGORY,
    ResolutionStage.CATEGORY,
    ResolutionStage.LOCATION,
    ResolutionStage.LOCATION_AS_CATEGORY,
)


@dataclass
class ResolveContextInput:
    """Input for ResolveContextUseCase."""

    segments: PathSegments
    index: HierarchyIndex


@dataclass
class ResolveContextOutput:
    """Output for ResolveContextUseCase."""

    context: ResolvedContext
    warnings: list[ResolutionWarning] = field(default_factory=list)
    unresolved_category_text: Optional[str] = None
    matched_by: dict[str, str] = field(default_factory=dict)


@dataclass
class _Resolution:
    """Working state of a single resolution attempt."""

    segments: PathSegments
    index: HierarchyIndex
    category: Optional[CategoryNode] = None
    subcategory: Optional[CategoryNode] = None
    location: Optional[LocationNode] = None
    warnings: list[ResolutionWarning] = field(default_factory=list)
    matched_by: dict[str, str] = field(default_factory=dict)


class ResolveContextUseCase:
    """
    Use case resolving browse URL segments to a ResolvedContext.

    Stages run in RESOLUTION_ORDER. A segment that matches nothing leaves
    its field unset; the only suspension point is the remote fuzzy
    location search.
    """

    def __init__(self, location_searcher: LocationSearcher) -> None:
        """
        Initialize the use case.

        Args:
            location_searcher: Remote fuzzy location search client.
        """
        self._searcher = location_searcher
        self._stages = {
            ResolutionStage.SUBCATEGORY: self._resolve_subcategory,
            ResolutionStage.CATEGORY: self._resolve_category,
            ResolutionStage.LOCATION: self._resolve_location,
            ResolutionStage.LOCATION_AS_CATEGORY: self._resolve_location_as_category,
        }

    async def execute(self, input_data: ResolveContextInput) -> ResolveContextOutput:
        """
        Execute the resolution cascade.

        Args:
            input_data: Raw segments and the built hierarchy index.

        Returns:
            Resolved context with soft warnings.
        """
        state = _Resolution(segments=input_data.segments, index=input_data.index)

        for stage in RESOLUTION_ORDER:
            outcome = await self._stages[stage](state)
            RESOLUTION_STAGE_OUTCOMES.labels(stage=stage.value, outcome=outcome).inc()

        context = ResolvedContext(
            category=state.category,
            subcategory=state.subcategory,
            location=state.location,
        )

        logger.debug(
            "Browse segments resolved",
            segments=[state.segments.location, state.segments.category, state.segments.subcategory],
            context=context.to_dict(),
            matched_by=state.matched_by,
        )

        return ResolveContextOutput(
            context=context,
            warnings=state.warnings,
            unresolved_category_text=self._unresolved_category_text(state),
            matched_by=state.matched_by,
        )

    async def _resolve_subcategory(self, state: _Resolution) -> str:
        segment = state.segments.subcategory
        if not segment:
            return "skipped"

        match = find_first(segment, state.index.subcategories, CATEGORY_STRATEGIES)
        if match is None:
            return "miss"

        subcategory: CategoryNode = match.candidate  # type: ignore[assignment]
        parent = state.index.parent_of(subcategory)
        if parent is None:
            logger.warning(
                "Subcategory parent missing from index",
                subcategory_id=subcategory.id,
                parent_id=subcategory.parent_id,
            )
            return "miss"

        category_segment = state.segments.category
        if category_segment and category_segment not in (parent.slug, to_slug(parent.name)):
            logger.debug(
                "Category segment disagrees with subcategory parent, subcategory wins",
                category_segment=category_segment,
                parent_slug=parent.slug,
            )

        state.subcategory = subcategory
        state.category = parent
        state.matched_by[ResolutionStage.SUBCATEGORY.value] = match.strategy
        return "hit"

    async def _resolve_category(self, state: _Resolution) -> str:
        segment = state.segments.category
        if not segment or state.subcategory is not None:
            return "skipped"

        match = find_first(segment, state.index.categories, CATEGORY_STRATEGIES)
        if match is None:
            return "miss"

        state.category = match.candidate  # type: ignore[assignment]
        state.matched_by[ResolutionStage.CATEGORY.value] = match.strategy
        return "hit"

    async def _resolve_location(self, state: _Resolution) -> str:
        segment = state.segments.location
        if not segment:
            return "skipped"

        index = state.index
        location = index.location(index.location_by_slug.get(segment))
        strategy = EXACT_SLUG.name

        if location is None:
            match = find_first(segment, tuple(index.all_locations()), LOCATION_STRATEGIES)
            if match is not None:
                location = match.candidate  # type: ignore[assignment]
                strategy = match.strategy

        if location is None:
            location = await self._search_remote(segment, state)
            strategy = "remote_search"

        if location is None:
            return "miss"

        state.location = location
        state.matched_by[ResolutionStage.LOCATION.value] = strategy
        return "hit"

    async def _resolve_location_as_category(self, state: _Resolution) -> str:
        segment = state.segments.location
        if (
            not segment
            or state.segments.explicit_location
            or state.location is not None
            or state.segments.category
            or state.category is not None
        ):
            return "skipped"

        index = state.index
        match = find_first(segment, index.categories, CATEGORY_STRATEGIES)
        if match is not None:
            state.category = match.candidate  # type: ignore[assignment]
            state.matched_by[ResolutionStage.LOCATION_AS_CATEGORY.value] = match.strategy
            return "hit"

        match = find_first(segment, index.subcategories, CATEGORY_STRATEGIES)
        if match is not None:
            subcategory: CategoryNode = match.candidate  # type: ignore[assignment]
            parent = index.parent_of(subcategory)
            if parent is not None:
                state.subcategory = subcategory
                state.category = parent
                state.matched_by[ResolutionStage.LOCATION_AS_CATEGORY.value] = match.strategy
                return "hit"

        return "miss"

    async def _search_remote(self, segment: str, state: _Resolution) -> Optional[LocationNode]:
        """
        Fall back to the remote fuzzy location search.

        Prefers a result whose generated slug equals the segment, otherwise
        the first result. Failures become soft warnings.
        """
        query = from_slug_guess(segment)
        if not query:
            return None

        try:
            results = await self._searcher.search_locations(query, limit=FUZZY_SEARCH_LIMIT)
        except LocationSearchError as e:
            logger.warning(
                "Location fuzzy search failed, continuing without location",
                segment=segment,
                error=e.message,
            )
            state.warnings.append(
                ResolutionWarning(
                    code="location_search_failed",
                    message=e.message,
                    segment=segment,
                )
            )
            return None

        if not results:
            return None

        for result in results[:FUZZY_SEARCH_LIMIT]:
            if to_slug(result.name) == segment:
                return result
        return results[0]

    def _unresolved_category_text(self, state: _Resolution) -> Optional[str]:
        segments = state.segments
        if segments.subcategory and state.subcategory is None:
            return segments.subcategory
        if segments.category and state.category is None:
            return segments.category
        return None
