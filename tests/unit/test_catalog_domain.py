"""
Unit tests for catalog domain entities.
"""
import pytest

from internal.domain.catalog import (
    CategoryNode,
    LocationLevel,
    LocationNode,
    PathSegments,
    ResolvedContext,
    SearchFilters,
)
from internal.domain.errors import DomainValidationError


class TestLocationNode:
    """Tests for LocationNode parsing."""

    def test_from_dict_builds_nested_tree(self, locations_payload):
        province = LocationNode.from_dict(locations_payload[0])

        assert province.level == LocationLevel.PROVINCE
        assert province.parent_id is None
        kathmandu = province.children[0]
        assert kathmandu.name == "Kathmandu"
        assert kathmandu.level == LocationLevel.DISTRICT
        assert kathmandu.parent_id == 1
        thamel = kathmandu.children[0].children[0]
        assert thamel.level == LocationLevel.AREA
        assert thamel.parent_id == 100

    def test_from_dict_accepts_generic_children_key(self, locations_payload):
        gandaki = LocationNode.from_dict(locations_payload[1])

        pokhara = gandaki.children[0].children[0]
        assert pokhara.name == "Pokhara"
        assert pokhara.slug == ""
        assert pokhara.parent_id == 20

    def test_declared_parent_id_wins(self):
        node = LocationNode.from_dict(
            {"id": 5, "name": "Dilli Bazaar", "level": "area", "parentId": 100}
        )
        assert node.parent_id == 100

    def test_unknown_level_rejected(self):
        with pytest.raises(DomainValidationError):
            LocationNode.from_dict({"id": 1, "name": "Mars", "type": "planet"})

    def test_to_dict_with_children(self, locations_payload):
        data = LocationNode.from_dict(locations_payload[1]).to_dict(include_children=True)

        assert data["level"] == "province"
        assert data["children"][0]["children"][0]["name"] == "Pokhara"


class TestCategoryNode:
    """Tests for CategoryNode parsing."""

    def test_subcategories_get_parent(self, categories_payload):
        mobile = CategoryNode.from_dict(categories_payload[0])

        assert not mobile.is_subcategory
        assert [sub.id for sub in mobile.subcategories] == [11, 12]
        assert all(sub.parent_id == 1 for sub in mobile.subcategories)
        assert mobile.subcategories[0].is_subcategory

    def test_rejects_third_level(self):
        payload = {
            "id": 1,
            "name": "Mobile",
            "slug": "mobile",
            "subcategories": [
                {
                    "id": 11,
                    "name": "Mobile Phones",
                    "slug": "mobile-phones",
                    "subcategories": [{"id": 111, "name": "Android", "slug": "android"}],
                }
            ],
        }
        with pytest.raises(DomainValidationError):
            CategoryNode.from_dict(payload)


class TestResolvedContext:
    """Tests for ResolvedContext invariants."""

    def test_subcategory_requires_category(self):
        sub = CategoryNode(id=11, name="Mobile Phones", slug="mobile-phones", parent_id=1)
        with pytest.raises(DomainValidationError):
            ResolvedContext(subcategory=sub)

    def test_subcategory_requires_its_own_parent(self):
        sub = CategoryNode(id=11, name="Mobile Phones", slug="mobile-phones", parent_id=1)
        other = CategoryNode(id=2, name="Electronics", slug="electronics")
        with pytest.raises(DomainValidationError):
            ResolvedContext(category=other, subcategory=sub)

    def test_deepest_category(self):
        mobile = CategoryNode(id=1, name="Mobile", slug="mobile")
        sub = CategoryNode(id=11, name="Mobile Phones", slug="mobile-phones", parent_id=1)

        assert ResolvedContext(category=mobile).deepest_category is mobile
        assert ResolvedContext(category=mobile, subcategory=sub).deepest_category is sub
        assert ResolvedContext().deepest_category is None
        assert ResolvedContext().is_empty

    def test_path_segments_empty(self):
        assert PathSegments().is_empty
        assert not PathSegments(location="thamel").is_empty


class TestSearchFilters:
    """Tests for SearchFilters."""

    def test_only_one_category_field(self):
        with pytest.raises(DomainValidationError):
            SearchFilters(parent_category_id=1, category_name="Mobile Phones")

    @pytest.mark.parametrize("limit,offset", [(0, 0), (-5, 0), (20, -1)])
    def test_rejects_bad_pagination(self, limit, offset):
        with pytest.raises(DomainValidationError):
            SearchFilters(limit=limit, offset=offset)

    def test_query_params_for_parent_category(self):
        filters = SearchFilters(parent_category_id=1, location_name="Kathmandu")

        assert filters.to_query_params() == {
            "parentCategoryId": 1,
            "location_name": "Kathmandu",
            "limit": 20,
            "offset": 0,
        }

    def test_query_params_for_category_name(self):
        filters = SearchFilters(
            category_name="Mobile Phones",
            min_price="1000",
            max_price="50000",
            condition="used",
            sort_by="price_low",
            limit=10,
            offset=30,
        )

        assert filters.to_query_params() == {
            "category": "Mobile Phones",
            "minPrice": "1000",
            "maxPrice": "50000",
            "condition": "used",
            "sortBy": "price_low",
            "limit": 10,
            "offset": 30,
        }

    def test_query_params_for_category_id(self):
        assert SearchFilters(category_id=11).to_query_params()["category"] == 11
