"""
Unit tests for the search filter builder.
"""
import pytest

from internal.domain.catalog import ResolvedContext
from internal.usecase.build_filters import BuildFiltersInput, build_search_filters


class TestBuildSearchFilters:
    """Tests for build_search_filters."""

    def test_subcategory_filters_by_name(self, catalog_index):
        context = ResolvedContext(
            category=catalog_index.category(1),
            subcategory=catalog_index.category(11),
            location=catalog_index.location(1000),
        )

        filters = build_search_filters(BuildFiltersInput(context=context))

        assert filters.category_name == "Mobile Phones"
        assert filters.parent_category_id is None
        assert filters.location_name == "Thamel"
        assert filters.to_query_params() == {
            "category": "Mobile Phones",
            "location_name": "Thamel",
            "limit": 20,
            "offset": 0,
        }

    def test_category_filters_by_parent_id(self, catalog_index):
        context = ResolvedContext(category=catalog_index.category(1))

        filters = build_search_filters(BuildFiltersInput(context=context))

        assert filters.parent_category_id == 1
        assert filters.category_name is None
        assert filters.to_query_params()["parentCategoryId"] == 1

    def test_resolved_category_beats_unresolved_text(self, catalog_index):
        context = ResolvedContext(category=catalog_index.category(1))

        filters = build_search_filters(
            BuildFiltersInput(context=context, unresolved_category_text="foldables")
        )

        assert filters.parent_category_id == 1
        assert filters.category_name is None

    @pytest.mark.parametrize("text,expected", [
        ("gadget-phones", "gadget-phones"),
        ("Gadgets", "Gadgets"),
        ("smart watches", "smart watches"),
    ])
    def test_unresolved_text_passed_through(self, text, expected):
        filters = build_search_filters(
            BuildFiltersInput(context=ResolvedContext(), unresolved_category_text=text)
        )

        assert filters.category_name == expected
        assert filters.parent_category_id is None

    def test_no_category(self, catalog_index):
        context = ResolvedContext(location=catalog_index.location(1))

        params = build_search_filters(BuildFiltersInput(context=context)).to_query_params()

        assert "category" not in params
        assert "parentCategoryId" not in params
        assert params["location_name"] == "Bagmati Province"

    def test_query_parameters(self):
        filters = build_search_filters(
            BuildFiltersInput(
                context=ResolvedContext(),
                min_price=" 1000 ",
                max_price="",
                condition="used",
                sort_by="price_low",
            )
        )

        assert filters.min_price == "1000"
        assert filters.max_price is None
        assert filters.condition == "used"
        assert filters.sort_by == "price_low"

    def test_default_sort_omitted(self):
        filters = build_search_filters(
            BuildFiltersInput(context=ResolvedContext(), sort_by="newest")
        )

        assert filters.sort_by is None
        assert "sortBy" not in filters.to_query_params()

    @pytest.mark.parametrize("page,page_size,limit,offset", [
        (1, 20, 20, 0),
        (3, 10, 10, 20),
        (0, 10, 10, 0),
        (-2, 10, 10, 0),
        (2, 0, 20, 20),
        (2, -5, 20, 20),
    ])
    def test_pagination(self, page, page_size, limit, offset):
        filters = build_search_filters(
            BuildFiltersInput(context=ResolvedContext(), page=page, page_size=page_size)
        )

        assert filters.limit == limit
        assert filters.offset == offset
