"""
Browse URL parsing and building.

URL patterns:
    /ads                              all ads
    /ads/nepal[/<cat>[/<sub>]]        whole country
    /ads/category/<cat>[/<sub>]       category without location
    /ads/location/<loc>[/<cat>[/<sub>]]  explicit location
    /ads/<seg>                        location, or category (ambiguous)
    /ads/<loc>/<cat>[/<sub>]          location plus category
    /ad/<title>-<location>-<id>       ad detail
"""
import re
from typing import Optional
from urllib.parse import unquote, urlsplit

from internal.domain.catalog import PathSegments
from pkg.slug.codec import to_slug


BROWSE_ROOT = "ads"
AD_ROOT = "ad"
CATEGORY_MARKER = "category"
LOCATION_MARKER = "location"
COUNTRY_SLUG = "nepal"

_RESERVED_SEGMENTS = frozenset({CATEGORY_MARKER, LOCATION_MARKER, COUNTRY_SLUG})
_AD_ID_RE = re.compile(r"-(\d+)$")


def _split_path(path: str) -> list[str]:
    raw_path = urlsplit(path).path if "://" in path or "?" in path else path
    return [unquote(part).strip() for part in raw_path.split("/") if part.strip()]


def parse_browse_path(path: Optional[str]) -> PathSegments:
    """
    Split a browse URL path into raw segments.

    Segments are URL-decoded but otherwise untouched; interpreting them is
    the resolver's job. Unknown shapes yield empty segments.

    Args:
        path: URL path such as "/ads/thamel/mobile/mobile-phones".

    Returns:
        PathSegments.
    """
    if not path:
        return PathSegments()

    parts = _split_path(path)
    if not parts or parts[0] != BROWSE_ROOT:
        return PathSegments()

    rest = parts[1:]
    if len(rest) > 1 and rest[0] == LOCATION_MARKER:
        tail = rest[1:]
        if len(tail) > 3:
            return PathSegments()
        return PathSegments(
            location=tail[0],
            category=tail[1] if len(tail) > 1 else None,
            subcategory=tail[2] if len(tail) > 2 else None,
            explicit_location=True,
        )

    if len(rest) > 3:
        return PathSegments()

    if rest and rest[0] in (CATEGORY_MARKER, COUNTRY_SLUG):
        tail = rest[1:]
        return PathSegments(
            category=tail[0] if len(tail) > 0 else None,
            subcategory=tail[1] if len(tail) > 1 else None,
        )

    return PathSegments(
        location=rest[0] if len(rest) > 0 else None,
        category=rest[1] if len(rest) > 1 else None,
        subcategory=rest[2] if len(rest) > 2 else None,
    )


def build_browse_url(
    location_slug: Optional[str] = None,
    category_slug: Optional[str] = None,
    subcategory_slug: Optional[str] = None,
) -> str:
    """
    Build a browse URL path; inverse of parse_browse_path.

    A subcategory without a category is ignored. Location slugs that
    collide with a path marker are written in the explicit
    /ads/location/<loc> form.
    """
    parts = [BROWSE_ROOT]
    if location_slug:
        if location_slug in _RESERVED_SEGMENTS:
            parts.append(LOCATION_MARKER)
        parts.append(location_slug)
    elif category_slug:
        parts.append(CATEGORY_MARKER)

    if category_slug:
        parts.append(category_slug)
        if subcategory_slug:
            parts.append(subcategory_slug)

    return "/" + "/".join(parts)


def build_ad_url(ad_id: int, title: str, location_name: Optional[str] = None) -> str:
    """
    Build an SEO-friendly ad detail URL.

    Pattern: /ad/<title-slug>-<location-slug>-<id>
    """
    parts = [to_slug(title), to_slug(location_name), str(ad_id)]
    return f"/{AD_ROOT}/" + "-".join(part for part in parts if part)


def extract_ad_id(path: Optional[str]) -> Optional[int]:
    """
    Extract the ad ID from an ad detail URL.

    Returns:
        Trailing numeric ID, or None.
    """
    if not path:
        return None
    parts = _split_path(path)
    if not parts:
        return None
    match = _AD_ID_RE.search(parts[-1])
    return int(match.group(1)) if match else None
