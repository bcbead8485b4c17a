"""
Metrics infrastructure package.
"""
from .prometheus import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
    RESOLUTION_STAGE_OUTCOMES,
    STALE_RESOLUTIONS_DISCARDED,
    FUZZY_SEARCH_REQUESTS,
    FUZZY_SEARCH_DURATION,
    INDEX_BUILD_DURATION,
    INDEXED_NODES,
    CATALOG_CACHE_LOOKUPS,
)

__all__ = [
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "RESOLUTION_STAGE_OUTCOMES",
    "STALE_RESOLUTIONS_DISCARDED",
    "FUZZY_SEARCH_REQUESTS",
    "FUZZY_SEARCH_DURATION",
    "INDEX_BUILD_DURATION",
    "INDEXED_NODES",
    "CATALOG_CACHE_LOOKUPS",
]
