"""
Breadcrumb and page meta builders.

Pure functions of a ResolvedContext. Labels come only from resolved
entities, so a context produced by the ambiguity fallback never shows a
location crumb.
"""
from dataclasses import dataclass
from typing import Optional, Union

from internal.domain.catalog import CategoryNode, LocationNode, ResolvedContext
from internal.usecase.browse_url import build_browse_url
from pkg.slug.codec import to_slug


SITE_NAME = "Thulobazaar"
META_DESCRIPTION_MAX_LENGTH = 155


@dataclass(frozen=True)
class Breadcrumb:
    """Single breadcrumb item."""

    label: str
    url: str
    active: bool = False

    def to_dict(self) -> dict:
        return {"label": self.label, "url": self.url, "active": self.active}


def _slug_of(node: Union[CategoryNode, LocationNode]) -> str:
    return node.slug or to_slug(node.name)


def build_breadcrumbs(
    context: ResolvedContext,
    ad_title: Optional[str] = None,
) -> list[Breadcrumb]:
    """
    Build the breadcrumb trail for a browse or ad detail page.

    Args:
        context: Resolved context.
        ad_title: Ad title for detail pages (rendered as the active crumb).

    Returns:
        Breadcrumbs from Home to the deepest resolved entity.
    """
    crumbs = [Breadcrumb(label="Home", url="/")]

    location_slug = _slug_of(context.location) if context.location else None
    if context.location is not None:
        crumbs.append(
            Breadcrumb(label=context.location.name, url=build_browse_url(location_slug))
        )

    if context.category is not None:
        category_slug = _slug_of(context.category)
        crumbs.append(
            Breadcrumb(
                label=context.category.name,
                url=build_browse_url(location_slug, category_slug),
            )
        )
        if context.subcategory is not None:
            crumbs.append(
                Breadcrumb(
                    label=context.subcategory.name,
                    url=build_browse_url(
                        location_slug, category_slug, _slug_of(context.subcategory)
                    ),
                )
            )

    if ad_title:
        crumbs.append(Breadcrumb(label=ad_title, url="", active=True))

    return crumbs


def build_meta_title(
    context: ResolvedContext,
    ad_title: Optional[str] = None,
    site_name: str = SITE_NAME,
) -> str:
    """
    Build the page title.

    Args:
        context: Resolved context.
        ad_title: Ad title for detail pages.
        site_name: Site name suffix.

    Returns:
        Page title.
    """
    category = context.deepest_category
    location = context.location

    if ad_title:
        parts = [ad_title]
        if location is not None:
            parts.append(location.name)
        parts.append(site_name)
        return " - ".join(parts)

    if category is not None and location is not None:
        return f"{category.name} in {location.name} - {site_name}"
    if category is not None:
        return f"{category.name} - {site_name}"
    if location is not None:
        return f"Buy, Sell in {location.name} - {site_name}"
    return site_name


def build_meta_description(
    context: ResolvedContext,
    ad_description: Optional[str] = None,
    count: Optional[int] = None,
) -> str:
    """
    Build the page meta description.

    Args:
        context: Resolved context.
        ad_description: Ad description for detail pages (truncated).
        count: Number of matching ads, when known.

    Returns:
        Meta description.
    """
    if ad_description:
        if len(ad_description) > META_DESCRIPTION_MAX_LENGTH:
            return ad_description[:META_DESCRIPTION_MAX_LENGTH] + "..."
        return ad_description

    count_text = f"{count} ads" if count else "ads"
    category = context.deepest_category
    location = context.location

    if category is not None and location is not None:
        return (
            f"Find {count_text} for {category.name} in {location.name}. "
            "Buy, sell, rent on Nepal's largest marketplace."
        )
    if category is not None:
        return (
            f"Browse {count_text} in {category.name} category. "
            "Buy, sell, rent across Nepal."
        )
    if location is not None:
        return (
            f"Find {count_text} in {location.name}. "
            "Buy, sell, rent on Nepal's largest marketplace."
        )
    return "Buy, sell, rent across Nepal. Find anything on Nepal's largest marketplace."
