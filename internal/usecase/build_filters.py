"""
Search Filter Builder.

Compiles a ResolvedContext plus query parameters into listing service
filters.
"""
from dataclasses import dataclass
from typing import Optional

from internal.domain.catalog import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    ResolvedContext,
    SearchFilters,
)


@dataclass
class BuildFiltersInput:
    """Input for build_search_filters."""

    context: ResolvedContext
    unresolved_category_text: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    condition: Optional[str] = None
    sort_by: Optional[str] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def build_search_filters(input_data: BuildFiltersInput) -> SearchFilters:
    """
    Build listing service filters.

    Category filter, first applicable branch wins:

    1. subcategory -> ``category_name`` (leaf-only match)
    2. category -> ``parent_category_id`` (category plus every subcategory)
    3. unresolved category text -> ``category_name`` so a failed lookup
       does not drop the filter
    4. no category filter

    Location is always filtered by name; the listing service expands a
    location name to all of its descendants itself.

    Args:
        input_data: Resolved context, query parameters and pagination.

    Returns:
        SearchFilters.
    """
    context = input_data.context

    category_name: Optional[str] = None
    parent_category_id: Optional[int] = None
    if context.subcategory is not None:
        category_name = context.subcategory.name
    elif context.category is not None:
        parent_category_id = context.category.id
    elif input_data.unresolved_category_text:
        category_name = input_data.unresolved_category_text

    sort_by = _clean(input_data.sort_by)
    if sort_by == DEFAULT_SORT:
        sort_by = None

    page = max(int(input_data.page or 1), 1)
    page_size = int(input_data.page_size or DEFAULT_PAGE_SIZE)
    if page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE

    return SearchFilters(
        limit=page_size,
        offset=(page - 1) * page_size,
        parent_category_id=parent_category_id,
        category_name=category_name,
        location_name=context.location.name if context.location else None,
        min_price=_clean(input_data.min_price),
        max_price=_clean(input_data.max_price),
        condition=_clean(input_data.condition),
        sort_by=sort_by,
    )
