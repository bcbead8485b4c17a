"""
Use case package for Browse Resolver Service.

Contains resolution, filter compilation and browse orchestration.
"""
from .build_filters import BuildFiltersInput, build_search_filters
from .browse_session import (
    BrowseQuery,
    BrowseResult,
    BrowseSession,
    BrowseSessionRegistry,
)
from .catalog_loader import CatalogLoader
from .hierarchy_index import HierarchyIndex, build_hierarchy_index
from .resolve_context import (
    RESOLUTION_ORDER,
    ResolutionStage,
    ResolveContextInput,
    ResolveContextOutput,
    ResolveContextUseCase,
)
from .search_listings import SearchListingsOutput, SearchListingsUseCase

__all__ = [
    "BuildFiltersInput",
    "build_search_filters",
    "BrowseQuery",
    "BrowseResult",
    "BrowseSession",
    "BrowseSessionRegistry",
    "CatalogLoader",
    "HierarchyIndex",
    "build_hierarchy_index",
    "RESOLUTION_ORDER",
    "ResolutionStage",
    "ResolveContextInput",
    "ResolveContextOutput",
    "ResolveContextUseCase",
    "SearchListingsOutput",
    "SearchListingsUseCase",
]
