"""
Slug package.
"""
from .codec import to_slug, from_slug_guess

__all__ = [
    "to_slug",
    "from_slug_guess",
]
