"""
Pytest configuration and fixtures.
"""
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from internal.domain.catalog import SearchFilters
from internal.infrastructure.http_clients.catalog_client import (
    parse_categories,
    parse_locations,
)
from internal.usecase.hierarchy_index import HierarchyIndex, build_hierarchy_index


@pytest.fixture
def categories_payload():
    """Category tree as returned by GET categories?includeSubcategories=true."""
    return [
        {
            "id": 1,
            "name": "Mobile",
            "slug": "mobile",
            "subcategories": [
                {"id": 11, "name": "Mobile Phones", "slug": "mobile-phones"},
                {"id": 12, "name": "Mobile Accessories", "slug": "mobile-accessories"},
            ],
        },
        {
            "id": 2,
            "name": "Electronics",
            "slug": "electronics",
            "subcategories": [
                {"id": 21, "name": "Laptops", "slug": "laptops"},
                {"id": 22, "name": "TVs & Video", "slug": "tvs-video"},
            ],
        },
        {
            "id": 3,
            "name": "Vehicles",
            "slug": "vehicles",
            "subcategories": [
                {"id": 31, "name": "Cars", "slug": "cars"},
                {"id": 32, "name": "Motorbikes", "slug": ""},
            ],
        },
    ]


@pytest.fixture
def locations_payload():
    """Location hierarchy as returned by GET locations/hierarchy."""
    return [
        {
            "id": 1,
            "name": "Bagmati Province",
            "slug": "bagmati-province",
            "type": "province",
            "districts": [
                {
                    "id": 10,
                    "name": "Kathmandu",
                    "slug": "kathmandu",
                    "type": "district",
                    "municipalities": [
                        {
                            "id": 100,
                            "name": "Kathmandu Metropolitan City",
                            "slug": "kathmandu-metropolitan-city",
                            "type": "municipality",
                            "areas": [
                                {"id": 1000, "name": "Thamel", "slug": "thamel", "type": "area"},
                            ],
                        },
                    ],
                },
                {
                    "id": 11,
                    "name": "Lalitpur",
                    "slug": "lalitpur",
                    "type": "district",
                    "municipalities": [
                        {
                            "id": 110,
                            "name": "Lalitpur Metropolitan City",
                            "slug": "lalitpur-metropolitan-city",
                            "type": "municipality",
                        },
                    ],
                },
            ],
        },
        {
            "id": 2,
            "name": "Gandaki Province",
            "slug": "gandaki-province",
            "type": "province",
            "children": [
                {
                    "id": 20,
                    "name": "Kaski",
                    "slug": "kaski",
                    "type": "district",
                    "children": [
                        {"id": 200, "name": "Pokhara", "slug": None, "type": "municipality"},
                    ],
                },
            ],
        },
    ]


@pytest.fixture
def catalog_index(categories_payload, locations_payload) -> HierarchyIndex:
    """Hierarchy index over the sample catalog."""
    return build_hierarchy_index(
        parse_locations(locations_payload),
        parse_categories(categories_payload),
    )


@pytest.fixture
def catalog_source(categories_payload, locations_payload):
    """Mock catalog service client."""
    source = AsyncMock()
    source.get_categories_raw = AsyncMock(return_value=categories_payload)
    source.get_location_hierarchy_raw = AsyncMock(return_value=locations_payload)
    return source


@pytest.fixture
def location_searcher():
    """Mock fuzzy location search returning no results."""
    searcher = AsyncMock()
    searcher.search_locations = AsyncMock(return_value=[])
    return searcher


class StubListingSource:
    """
    In-memory listing service.

    Expands ``parentCategoryId`` to the category and its subcategories and
    ``location_name`` to the location and all of its descendants, the way
    the real listing service does.
    """

    def __init__(self, index: HierarchyIndex, ads: list[dict]) -> None:
        self._index = index
        self._ads = ads
        self.requests: list[dict[str, Any]] = []

    def _category_ids(self, params: dict) -> Optional[set[int]]:
        if "parentCategoryId" in params:
            parent = self._index.category(params["parentCategoryId"])
            return {parent.id, *(sub.id for sub in parent.subcategories)}
        if "category" in params:
            value = params["category"]
            if isinstance(value, int):
                return {value}
            return {
                node.id
                for node in self._index.categories_by_id.values()
                if node.name == value
            }
        return None

    def _location_ids(self, params: dict) -> Optional[set[int]]:
        if "location_name" not in params:
            return None
        root_id = self._index.location_by_name.get(params["location_name"])
        if root_id is None:
            return set()
        ids = set()
        stack = [self._index.location(root_id)]
        while stack:
            node = stack.pop()
            ids.add(node.id)
            stack.extend(node.children)
        return ids

    async def search_ads(self, filters: SearchFilters) -> dict[str, Any]:
        params = filters.to_query_params()
        self.requests.append(params)

        category_ids = self._category_ids(params)
        location_ids = self._location_ids(params)
        matches = [
            ad
            for ad in self._ads
            if (category_ids is None or ad["category_id"] in category_ids)
            and (location_ids is None or ad["location_id"] in location_ids)
        ]

        offset, limit = params["offset"], params["limit"]
        page = matches[offset:offset + limit]
        return {
            "data": page,
            "pagination": {
                "total": len(matches),
                "hasMore": offset + len(page) < len(matches),
            },
        }


@pytest.fixture
def sample_ads():
    """Ads tagged with leaf categories and locations at various levels."""
    return [
        {"id": 1, "title": "iPhone 13", "category_id": 11, "location_id": 1000},
        {"id": 2, "title": "Phone Case", "category_id": 12, "location_id": 110},
        {"id": 3, "title": "Mobile Bundle", "category_id": 1, "location_id": 10},
        {"id": 4, "title": "ThinkPad X1", "category_id": 21, "location_id": 1000},
        {"id": 5, "title": "Toyota Yaris", "category_id": 31, "location_id": 200},
    ]


@pytest.fixture
def listing_source(catalog_index, sample_ads) -> StubListingSource:
    """Stub listing service over the sample ads."""
    return StubListingSource(catalog_index, sample_ads)
