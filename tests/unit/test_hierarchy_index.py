"""
Unit tests for the hierarchy index builder.
"""
import pytest

from internal.domain.catalog import CategoryNode, LocationLevel, LocationNode
from internal.usecase.hierarchy_index import build_hierarchy_index


class TestBuildHierarchyIndex:
    """Tests for build_hierarchy_index."""

    def test_stats(self, catalog_index):
        assert catalog_index.stats() == {
            "locations": 9,
            "categories": 3,
            "subcategories": 6,
        }

    @pytest.mark.parametrize("slug,location_id", [
        ("bagmati-province", 1),
        ("kathmandu", 10),
        ("kathmandu-metropolitan-city", 100),
        ("thamel", 1000),
        ("kaski", 20),
    ])
    def test_every_level_indexed_by_slug(self, catalog_index, slug, location_id):
        assert catalog_index.location_by_slug[slug] == location_id

    def test_locations_indexed_by_name(self, catalog_index):
        assert catalog_index.location_by_name["Thamel"] == 1000
        assert catalog_index.location_by_name["Pokhara"] == 200
        assert catalog_index.location(200).level == LocationLevel.MUNICIPALITY

    def test_missing_slug_not_indexed(self, catalog_index):
        assert "" not in catalog_index.location_by_slug
        assert "" not in catalog_index.category_by_slug

    def test_categories_and_subcategories_indexed(self, catalog_index):
        assert catalog_index.category_by_slug["mobile-phones"] == 11
        assert catalog_index.category_by_name["Electronics"] == 2

        sub = catalog_index.category(11)
        assert sub.parent_id == 1
        assert catalog_index.parent_of(sub).name == "Mobile"

    def test_subcategories_in_catalog_order(self, catalog_index):
        assert [sub.id for sub in catalog_index.subcategories] == [11, 12, 21, 22, 31, 32]

    def test_lookups_of_none(self, catalog_index):
        assert catalog_index.location(None) is None
        assert catalog_index.category(None) is None
        assert catalog_index.location(999999) is None

    def test_first_visited_wins_on_collision(self):
        district = LocationNode(
            id=10,
            name="Kathmandu",
            slug="kathmandu",
            level=LocationLevel.DISTRICT,
            children=(
                LocationNode(
                    id=100,
                    name="Kathmandu",
                    slug="kathmandu",
                    level=LocationLevel.MUNICIPALITY,
                    parent_id=10,
                ),
            ),
        )

        index = build_hierarchy_index([district], [])

        assert index.location_by_slug["kathmandu"] == 10
        assert index.location_by_name["Kathmandu"] == 10
        assert index.location(100) is not None

    def test_duplicate_ids_skipped(self):
        first = LocationNode(id=1, name="Bagmati", slug="bagmati", level=LocationLevel.PROVINCE)
        duplicate = LocationNode(id=1, name="Other", slug="other", level=LocationLevel.PROVINCE)

        index = build_hierarchy_index([first, duplicate], [])

        assert index.location(1).name == "Bagmati"
        assert "other" not in index.location_by_slug

    def test_index_is_read_only(self, catalog_index):
        with pytest.raises(TypeError):
            catalog_index.location_by_slug["new"] = 1

    def test_empty_catalog(self):
        index = build_hierarchy_index([], [CategoryNode(id=1, name="Mobile", slug="mobile")])

        assert index.stats() == {"locations": 0, "categories": 1, "subcategories": 0}
        assert index.subcategories == ()
