"""
Prometheus Metrics for Browse Resolver Service.

Defines all metrics for monitoring resolution quality and latency.
"""

from prometheus_client import Counter, Histogram, Gauge

# API metrics
HTTP_REQUESTS_TOTAL = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'route', 'status_code']
)

HTTP_REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'route'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Resolution metrics
RESOLUTION_STAGE_OUTCOMES = Counter(
    'resolution_stage_outcomes_total',
    'Resolution stage outcomes',
    ['stage', 'outcome']  # outcome: hit, miss, skipped
)

STALE_RESOLUTIONS_DISCARDED = Counter(
    'stale_resolutions_discarded_total',
    'Resolutions discarded because a newer navigation started'
)

FUZZY_SEARCH_REQUESTS = Counter(
    'location_fuzzy_search_requests_total',
    'Remote fuzzy location search calls',
    ['status']  # success, empty, error, circuit_open
)

FUZZY_SEARCH_DURATION = Histogram(
    'location_fuzzy_search_duration_seconds',
    'Remote fuzzy location search duration',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# Catalog metrics
INDEX_BUILD_DURATION = Histogram(
    'hierarchy_index_build_duration_seconds',
    'Time to fetch the catalog and build the hierarchy index',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

INDEXED_NODES = Gauge(
    'hierarchy_indexed_nodes',
    'Nodes in the current hierarchy index',
    ['kind']  # locations, categories, subcategories
)

CATALOG_CACHE_LOOKUPS = Counter(
    'catalog_cache_lookups_total',
    'Catalog cache lookups',
    ['resource', 'result']  # result: hit, miss
)
