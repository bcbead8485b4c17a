"""
Hierarchy Index Builder.

Flattens the location and category trees into O(1) lookup maps.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from internal.domain.catalog import CategoryNode, LocationNode
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class HierarchyIndex:
    """
    Read-only reverse lookup indexes over the catalog trees.

    Name and slug maps point to entity IDs; the ``*_by_id`` maps resolve
    IDs back to nodes. On key collisions the first node visited wins.
    """

    location_by_name: Mapping[str, int]
    location_by_slug: Mapping[str, int]
    category_by_name: Mapping[str, int]
    category_by_slug: Mapping[str, int]
    locations_by_id: Mapping[int, LocationNode]
    categories_by_id: Mapping[int, CategoryNode]
    categories: tuple[CategoryNode, ...]

    def location(self, location_id: Optional[int]) -> Optional[LocationNode]:
        """Get a location node by ID."""
        if location_id is None:
            return None
        return self.locations_by_id.get(location_id)

    def category(self, category_id: Optional[int]) -> Optional[CategoryNode]:
        """Get a category or subcategory node by ID."""
        if category_id is None:
            return None
        return self.categories_by_id.get(category_id)

    def parent_of(self, subcategory: CategoryNode) -> Optional[CategoryNode]:
        """Get the owning top-level category of a subcategory."""
        return self.category(subcategory.parent_id)

    def all_locations(self) -> Iterable[LocationNode]:
        """Iterate over every indexed location, in traversal order."""
        return self.locations_by_id.values()

    @property
    def subcategories(self) -> tuple[CategoryNode, ...]:
        """Every subcategory, grouped by parent in catalog order."""
        return tuple(sub for cat in self.categories for sub in cat.subcategories)

    def stats(self) -> dict:
        """Node counts for diagnostics."""
        return {
            "locations": len(self.locations_by_id),
            "categories": len(self.categories),
            "subcategories": len(self.categories_by_id) - len(self.categories),
        }


def _add_first(target: dict, key: str, value: int) -> None:
    if key and key not in target:
        target[key] = value


def build_hierarchy_index(
    locations: Iterable[LocationNode],
    categories: Iterable[CategoryNode],
) -> HierarchyIndex:
    """
    Build lookup indexes over both catalog trees.

    Depth-first traversal inserting every node at every level into both
    its name map and slug map. O(n) in the total node count.

    Args:
        locations: Root location nodes (provinces).
        categories: Top-level categories with embedded subcategories.

    Returns:
        Immutable HierarchyIndex.
    """
    location_by_name: dict[str, int] = {}
    location_by_slug: dict[str, int] = {}
    locations_by_id: dict[int, LocationNode] = {}

    stack = list(reversed(list(locations)))
    while stack:
        node = stack.pop()
        if node.id in locations_by_id:
            logger.warning("Duplicate location id in hierarchy", location_id=node.id)
            continue
        locations_by_id[node.id] = node
        _add_first(location_by_name, node.name, node.id)
        _add_first(location_by_slug, node.slug, node.id)
        stack.extend(reversed(node.children))

    category_by_name: dict[str, int] = {}
    category_by_slug: dict[str, int] = {}
    categories_by_id: dict[int, CategoryNode] = {}
    top_level = tuple(categories)

    for category in top_level:
        for node in (category, *category.subcategories):
            categories_by_id.setdefault(node.id, node)
            _add_first(category_by_name, node.name, node.id)
            _add_first(category_by_slug, node.slug, node.id)

    index = HierarchyIndex(
        location_by_name=MappingProxyType(location_by_name),
        location_by_slug=MappingProxyType(location_by_slug),
        category_by_name=MappingProxyType(category_by_name),
        category_by_slug=MappingProxyType(category_by_slug),
        locations_by_id=MappingProxyType(locations_by_id),
        categories_by_id=MappingProxyType(categories_by_id),
        categories=top_level,
    )

    logger.info("Hierarchy index built", **index.stats())
    return index
