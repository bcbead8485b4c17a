"""
Segment matcher strategies.

Each strategy is a named pure predicate ``(segment, candidate) -> bool``.
Strategies are applied in list order; the first strategy with any hit wins.
"""
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, Sequence, TypeVar

from pkg.slug.codec import to_slug


class Named(Protocol):
    """Anything with a display name and slug."""

    name: str
    slug: str


N = TypeVar("N", bound=Named)


@dataclass(frozen=True)
class MatchStrategy:
    """Named match predicate."""

    name: str
    predicate: Callable[[str, Named], bool]

    def __call__(self, segment: str, candidate: Named) -> bool:
        return self.predicate(segment, candidate)


def exact_name(segment: str, candidate: Named) -> bool:
    return candidate.name == segment


def casefold_name(segment: str, candidate: Named) -> bool:
    return candidate.name.lower() == segment.lower()


def exact_slug(segment: str, candidate: Named) -> bool:
    return bool(candidate.slug) and candidate.slug == segment


def generated_slug(segment: str, candidate: Named) -> bool:
    # Catalog rows with a stale or missing slug still match on their name
    return to_slug(candidate.name) == segment


EXACT_NAME = MatchStrategy("exact_name", exact_name)
CASEFOLD_NAME = MatchStrategy("casefold_name", casefold_name)
EXACT_SLUG = MatchStrategy("exact_slug", exact_slug)
GENERATED_SLUG = MatchStrategy("generated_slug", generated_slug)

CATEGORY_STRATEGIES: tuple[MatchStrategy, ...] = (
    EXACT_NAME,
    CASEFOLD_NAME,
    EXACT_SLUG,
    GENERATED_SLUG,
)

LOCATION_STRATEGIES: tuple[MatchStrategy, ...] = (
    EXACT_SLUG,
    GENERATED_SLUG,
)


@dataclass(frozen=True)
class Match:
    """Successful match of a segment against a candidate."""

    candidate: Named
    strategy: str


def find_first(
    segment: Optional[str],
    candidates: Sequence[N],
    strategies: Iterable[MatchStrategy] = CATEGORY_STRATEGIES,
) -> Optional[Match]:
    """
    Find the first candidate matching a segment.

    Strategy priority dominates candidate order: every candidate is tried
    with the first strategy before any candidate is tried with the second.

    Args:
        segment: Raw path segment.
        candidates: Candidates in catalog order.
        strategies: Strategies in priority order.

    Returns:
        Match with the winning candidate and strategy name, or None.
    """
    if not segment:
        return None

    for strategy in strategies:
        for candidate in candidates:
            if strategy(segment, candidate):
                return Match(candidate=candidate, strategy=strategy.name)
    return None
