"""
Domain package for Browse Resolver Service.

Contains catalog entities, resolution values, and domain errors.
"""
from .catalog import (
    LocationLevel,
    LocationNode,
    CategoryNode,
    PathSegments,
    ResolvedContext,
    ResolutionWarning,
    SearchFilters,
    DEFAULT_SORT,
    DEFAULT_PAGE_SIZE,
)
from .errors import (
    DomainError,
    DomainValidationError,
    CatalogUnavailableError,
    LocationSearchError,
    ListingServiceError,
)

__all__ = [
    "LocationLevel",
    "LocationNode",
    "CategoryNode",
    "PathSegments",
    "ResolvedContext",
    "ResolutionWarning",
    "SearchFilters",
    "DEFAULT_SORT",
    "DEFAULT_PAGE_SIZE",
    "DomainError",
    "DomainValidationError",
    "CatalogUnavailableError",
    "LocationSearchError",
    "ListingServiceError",
]
