"""
Slug codec.

Converts display names to URL-safe slugs and back (best-effort).
Slugs are comparison keys only, never the source of truth.
"""
import re
from typing import Optional


_DISALLOWED_RE = re.compile(r"[^a-z0-9\s_-]")
_SEPARATOR_RUN_RE = re.compile(r"[\s_-]+")


def to_slug(text: Optional[str]) -> str:
    """
    Convert text to a URL-friendly slug.

    Lowercases, strips characters outside ``[a-z0-9\\s_-]``, collapses
    whitespace, underscores and repeated hyphens into single hyphens and
    trims leading/trailing hyphens.

    Args:
        text: Display text (e.g. "Mobile Phones").

    Returns:
        Slug (e.g. "mobile-phones"), or empty string for empty input.
    """
    if not text:
        return ""

    slug = _DISALLOWED_RE.sub("", text.lower().strip())
    slug = _SEPARATOR_RUN_RE.sub("-", slug)
    return slug.strip("-")


def from_slug_guess(slug: Optional[str]) -> str:
    """
    Guess a display name from a slug.

    "dilli-bazaar" -> "Dilli Bazaar". Only good enough to seed a fuzzy search.

    Args:
        slug: URL slug.

    Returns:
        Capitalized, space-separated guess.
    """
    if not slug:
        return ""

    tokens = [token for token in slug.split("-") if token]
    return " ".join(token.capitalize() for token in tokens)
