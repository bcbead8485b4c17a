"""
Data Transfer Objects for Browse Resolver Service API.

Contains Pydantic models for response serialization.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from internal.domain.catalog import (
    CategoryNode,
    LocationNode,
    PathSegments,
    ResolvedContext,
    SearchFilters,
)
from internal.usecase.browse_session import BrowseResult
from internal.usecase.hierarchy_index import HierarchyIndex
from internal.usecase.resolve_context import ResolveContextOutput


# Catalog DTOs
class CategoryDTO(BaseModel):
    """Category or subcategory."""

    id: int = Field(..., description="Category ID")
    name: str = Field(..., description="Category name")
    slug: str = Field(..., description="URL slug")
    parent_id: Optional[int] = Field(None, description="Parent category ID (subcategories only)")

    class Config:
        json_schema_extra = {
            "example": {"id": 12, "name": "Mobile Phones", "slug": "mobile-phones", "parent_id": 3}
        }

    @classmethod
    def from_node(cls, node: Optional[CategoryNode]) -> Optional["CategoryDTO"]:
        if node is None:
            return None
        return cls(id=node.id, name=node.name, slug=node.slug, parent_id=node.parent_id)


class LocationDTO(BaseModel):
    """Location at any hierarchy level."""

    id: int = Field(..., description="Location ID")
    name: str = Field(..., description="Location name")
    slug: str = Field(..., description="URL slug")
    level: str = Field(..., description="province, district, municipality or area")
    parent_id: Optional[int] = Field(None, description="Parent location ID")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 301,
                "name": "Thamel",
                "slug": "thamel",
                "level": "area",
                "parent_id": 201,
            }
        }

    @classmethod
    def from_node(cls, node: Optional[LocationNode]) -> Optional["LocationDTO"]:
        if node is None:
            return None
        return cls(
            id=node.id,
            name=node.name,
            slug=node.slug,
            level=node.level.value,
            parent_id=node.parent_id,
        )


# Resolution DTOs
class SegmentsDTO(BaseModel):
    """Raw path segments parsed from the browse URL."""

    location: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None

    @classmethod
    def from_segments(cls, segments: PathSegments) -> "SegmentsDTO":
        return cls(
            location=segments.location,
            category=segments.category,
            subcategory=segments.subcategory,
        )


class ResolvedContextDTO(BaseModel):
    """Resolved catalog entities."""

    category: Optional[CategoryDTO] = Field(None, description="Top-level category")
    subcategory: Optional[CategoryDTO] = Field(None, description="Subcategory")
    location: Optional[LocationDTO] = Field(None, description="Location")

    @classmethod
    def from_context(cls, context: ResolvedContext) -> "ResolvedContextDTO":
        return cls(
            category=CategoryDTO.from_node(context.category),
            subcategory=CategoryDTO.from_node(context.subcategory),
            location=LocationDTO.from_node(context.location),
        )


class WarningDTO(BaseModel):
    """Soft resolution warning."""

    code: str
    message: str
    segment: Optional[str] = None


class SearchFiltersDTO(BaseModel):
    """Compiled listing filters, with the listing service query parameters."""

    category_id: Optional[int] = None
    parent_category_id: Optional[int] = None
    category_name: Optional[str] = None
    location_name: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    condition: Optional[str] = None
    sort_by: Optional[str] = None
    limit: int
    offset: int
    query_params: Dict[str, Any] = Field(
        default_factory=dict,
        description="Parameters sent verbatim to GET ads",
    )

    @classmethod
    def from_filters(cls, filters: SearchFilters) -> "SearchFiltersDTO":
        return cls(
            category_id=filters.category_id,
            parent_category_id=filters.parent_category_id,
            category_name=filters.category_name,
            location_name=filters.location_name,
            min_price=filters.min_price,
            max_price=filters.max_price,
            condition=filters.condition,
            sort_by=filters.sort_by,
            limit=filters.limit,
            offset=filters.offset,
            query_params=filters.to_query_params(),
        )


class BreadcrumbDTO(BaseModel):
    """Breadcrumb item."""

    label: str
    url: str
    active: bool = False


class MetaDTO(BaseModel):
    """Page meta tags."""

    title: str
    description: str


class PaginationDTO(BaseModel):
    """Listing pagination information."""

    total: int = Field(..., description="Total number of matching ads")
    has_more: bool = Field(..., description="Whether more pages exist")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Offset of the first ad")
    total_pages: int = Field(..., description="Total number of pages")


class ResolveResponse(BaseModel):
    """Resolution result for a browse URL."""

    sequence: int = Field(..., description="Navigation sequence number within the session")
    segments: SegmentsDTO
    context: ResolvedContextDTO
    filters: SearchFiltersDTO
    breadcrumbs: List[BreadcrumbDTO] = Field(default_factory=list)
    meta: MetaDTO
    warnings: List[WarningDTO] = Field(default_factory=list)
    matched_by: Dict[str, str] = Field(default_factory=dict, description="Winning strategy per stage")
    unresolved_category_text: Optional[str] = Field(
        None,
        description="Category segment text that matched no catalog entry",
    )


class BrowseResponse(ResolveResponse):
    """Resolution result plus the listing page."""

    data: List[Dict[str, Any]] = Field(default_factory=list, description="Ads")
    pagination: Optional[PaginationDTO] = None


class CatalogStatsResponse(BaseModel):
    """Node counts of the current hierarchy index."""

    locations: int
    categories: int
    subcategories: int

    @classmethod
    def from_index(cls, index: HierarchyIndex) -> "CatalogStatsResponse":
        return cls(**index.stats())


def _resolution_fields(result: BrowseResult, resolution: ResolveContextOutput) -> dict:
    return {
        "sequence": result.sequence,
        "segments": SegmentsDTO.from_segments(result.segments),
        "context": ResolvedContextDTO.from_context(resolution.context),
        "filters": SearchFiltersDTO.from_filters(result.filters),
        "breadcrumbs": [BreadcrumbDTO(**crumb.to_dict()) for crumb in result.breadcrumbs],
        "meta": MetaDTO(title=result.meta_title, description=result.meta_description),
        "warnings": [WarningDTO(**warning.to_dict()) for warning in resolution.warnings],
        "matched_by": dict(resolution.matched_by),
        "unresolved_category_text": resolution.unresolved_category_text,
    }


def build_resolve_response(result: BrowseResult) -> ResolveResponse:
    """Build a ResolveResponse from a browse result."""
    return ResolveResponse(**_resolution_fields(result, result.resolution))


def build_browse_response(result: BrowseResult) -> BrowseResponse:
    """Build a BrowseResponse from a browse result."""
    fields = _resolution_fields(result, result.resolution)
    listings = result.listings
    if listings is None:
        return BrowseResponse(**fields)

    return BrowseResponse(
        **fields,
        data=listings.ads,
        pagination=PaginationDTO(
            total=listings.total,
            has_more=listings.has_more,
            limit=listings.limit,
            offset=listings.offset,
            total_pages=listings.total_pages,
        ),
    )
