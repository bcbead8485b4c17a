"""
Domain model for the browse catalog.

Locations, categories and the values derived from resolving a browse URL
against them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from internal.domain.errors import DomainValidationError


class LocationLevel(str, Enum):
    """Level of a node in the location hierarchy."""

    PROVINCE = "province"
    DISTRICT = "district"
    MUNICIPALITY = "municipality"
    AREA = "area"


@dataclass(frozen=True)
class LocationNode:
    """
    Node of the location tree (province -> district -> municipality -> area).

    Attributes:
        id: Location identifier.
        name: Display name.
        slug: URL slug. Not unique across levels.
        level: Hierarchy level.
        parent_id: Parent location ID (None for provinces).
        children: Child locations.
    """

    id: int
    name: str
    slug: str
    level: LocationLevel
    parent_id: Optional[int] = None
    children: tuple["LocationNode", ...] = ()

    @classmethod
    def from_dict(cls, data: dict, parent_id: Optional[int] = None) -> "LocationNode":
        """
        Build a location subtree from catalog service payload.

        Accepts both ``type`` and ``level`` keys for the level and either
        ``children`` or the level-specific child keys the catalog emits.

        Args:
            data: Location payload.
            parent_id: Parent ID to use when the payload omits it.

        Returns:
            LocationNode with nested children.
        """
        level_raw = data.get("level") or data.get("type") or LocationLevel.AREA.value
        try:
            level = LocationLevel(str(level_raw).lower())
        except ValueError as e:
            raise DomainValidationError(f"Unknown location level: {level_raw}") from e

        node_id = int(data["id"])
        raw_children = (
            data.get("children")
            or data.get("districts")
            or data.get("municipalities")
            or data.get("areas")
            or []
        )
        children = tuple(cls.from_dict(child, parent_id=node_id) for child in raw_children)

        declared_parent = data.get("parent_id", data.get("parentId"))
        return cls(
            id=node_id,
            name=data["name"],
            slug=data.get("slug") or "",
            level=level,
            parent_id=int(declared_parent) if declared_parent is not None else parent_id,
            children=children,
        )

    def to_dict(self, include_children: bool = False) -> dict:
        """
        Convert to dictionary representation.

        Args:
            include_children: Whether to serialize the subtree.

        Returns:
            Dictionary with location data.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "level": self.level.value,
            "parent_id": self.parent_id,
        }
        if include_children:
            data["children"] = [child.to_dict(include_children=True) for child in self.children]
        return data


@dataclass(frozen=True)
class CategoryNode:
    """
    Category or subcategory.

    The category tree is exactly two levels deep: top-level categories own
    subcategories, subcategories own nothing.
    """

    id: int
    name: str
    slug: str
    parent_id: Optional[int] = None
    subcategories: tuple["CategoryNode", ...] = ()

    @classmethod
    def from_dict(cls, data: dict, parent_id: Optional[int] = None) -> "CategoryNode":
        """
        Build a category from catalog service payload.

        Raises:
            DomainValidationError: If the payload nests deeper than two levels.
        """
        node_id = int(data["id"])
        raw_subs = data.get("subcategories") or []
        if parent_id is not None and raw_subs:
            raise DomainValidationError(
                f"Category {node_id} is nested deeper than category -> subcategory"
            )

        declared_parent = data.get("parent_id", data.get("parentId"))
        return cls(
            id=node_id,
            name=data["name"],
            slug=data.get("slug") or "",
            parent_id=int(declared_parent) if declared_parent is not None else parent_id,
            subcategories=tuple(cls.from_dict(sub, parent_id=node_id) for sub in raw_subs),
        )

    @property
    def is_subcategory(self) -> bool:
        """Whether this node sits under a parent category."""
        return self.parent_id is not None

    def to_dict(self) -> dict:
        """Convert to dictionary representation (without subcategories)."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "parent_id": self.parent_id,
        }


@dataclass(frozen=True)
class PathSegments:
    """
    Raw browse URL segments, any of which may be absent.

    explicit_location marks the /ads/location/<loc> form, where the
    location segment is never reinterpreted as a category.
    """

    location: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    explicit_location: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.location or self.category or self.subcategory)


@dataclass(frozen=True)
class ResolvedContext:
    """
    Canonical {category, subcategory, location} triple for a browse URL.

    Raises:
        DomainValidationError: If a subcategory is set without its parent.
    """

    category: Optional[CategoryNode] = None
    subcategory: Optional[CategoryNode] = None
    location: Optional[LocationNode] = None

    def __post_init__(self) -> None:
        if self.subcategory is None:
            return
        if self.category is None:
            raise DomainValidationError("Subcategory resolved without its parent category")
        if self.subcategory.parent_id != self.category.id:
            raise DomainValidationError(
                f"Category {self.category.id} is not the parent of "
                f"subcategory {self.subcategory.id}"
            )

    @property
    def deepest_category(self) -> Optional[CategoryNode]:
        """The subcategory if resolved, otherwise the category."""
        return self.subcategory or self.category

    @property
    def is_empty(self) -> bool:
        return self.category is None and self.location is None

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "category": self.category.to_dict() if self.category else None,
            "subcategory": self.subcategory.to_dict() if self.subcategory else None,
            "location": self.location.to_dict() if self.location else None,
        }


@dataclass(frozen=True)
class ResolutionWarning:
    """Soft, non-fatal problem encountered while resolving a URL."""

    code: str
    message: str
    segment: Optional[str] = None

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "segment": self.segment}


DEFAULT_SORT = "newest"
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class SearchFilters:
    """
    Filter parameters for the listing query service.

    At most one of ``category_id``, ``parent_category_id`` and
    ``category_name`` is populated.
    """

    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0
    category_id: Optional[int] = None
    parent_category_id: Optional[int] = None
    category_name: Optional[str] = None
    location_name: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    condition: Optional[str] = None
    sort_by: Optional[str] = None

    def __post_init__(self) -> None:
        populated = [
            value
            for value in (self.category_id, self.parent_category_id, self.category_name)
            if value is not None
        ]
        if len(populated) > 1:
            raise DomainValidationError(
                "Only one of category_id, parent_category_id, category_name may be set"
            )
        if self.limit <= 0:
            raise DomainValidationError(f"Limit must be positive, got {self.limit}")
        if self.offset < 0:
            raise DomainValidationError(f"Offset cannot be negative, got {self.offset}")

    def to_query_params(self) -> dict[str, Any]:
        """
        Render the listing service query string parameters.

        Field names follow the ``GET ads`` contract verbatim; unset fields
        are omitted.
        """
        params: dict[str, Any] = {}
        if self.category_id is not None:
            params["category"] = self.category_id
        elif self.parent_category_id is not None:
            params["parentCategoryId"] = self.parent_category_id
        elif self.category_name is not None:
            params["category"] = self.category_name

        optional = (
            ("location_name", self.location_name),
            ("minPrice", self.min_price),
            ("maxPrice", self.max_price),
            ("condition", self.condition),
            ("sortBy", self.sort_by),
        )
        for key, value in optional:
            if value is not None:
                params[key] = value

        params["limit"] = self.limit
        params["offset"] = self.offset
        return params
