"""
FastAPI HTTP Handlers for Browse Resolver Service API v1.

Implements REST endpoints resolving SEO browse URLs to listing filters.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from internal.domain.errors import CatalogUnavailableError, ListingServiceError
from internal.transport.http.dto import (
    BrowseResponse,
    CatalogStatsResponse,
    ResolveResponse,
    build_browse_response,
    build_resolve_response,
)
from internal.usecase.browse_session import (
    BrowseQuery,
    BrowseResult,
    BrowseSessionRegistry,
)
from internal.usecase.browse_url import BROWSE_ROOT
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(prefix="/api/v1", tags=["browse"])

MAX_PAGE_SIZE = 100


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str


# Dependency injection container (simplified)
class Dependencies:
    """Container for handler dependencies."""

    registry: Optional[BrowseSessionRegistry] = None


_deps = Dependencies()


def get_registry() -> BrowseSessionRegistry:
    """Get BrowseSessionRegistry instance."""
    if _deps.registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return _deps.registry


def set_dependencies(registry: Optional[BrowseSessionRegistry]) -> None:
    """
    Set handler dependencies.

    Called during application startup.
    """
    _deps.registry = registry


def get_browse_query(
    min_price: Optional[str] = Query(None, alias="minPrice", description="Minimum price"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Maximum price"),
    condition: Optional[str] = Query(None, description="Item condition (new, used)"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Sort order"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, alias="pageSize", ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> BrowseQuery:
    """Collect browse query string parameters."""
    return BrowseQuery(
        min_price=min_price,
        max_price=max_price,
        condition=condition,
        sort_by=sort_by,
        page=page,
        page_size=page_size,
    )


async def _run_browse(
    registry: BrowseSessionRegistry,
    path: str,
    query: BrowseQuery,
    session_id: Optional[str],
    include_listings: bool,
) -> BrowseResult:
    session = registry.get(session_id)
    browse_path = f"/{BROWSE_ROOT}/{path.strip('/')}"

    try:
        result = await session.browse(browse_path, query, include_listings=include_listings)
    except CatalogUnavailableError as e:
        logger.error("Catalog unavailable", error=e.message, path=browse_path)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message,
        )
    except ListingServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Superseded by a newer navigation in this session",
        )
    return result


# Handlers
@router.get(
    "/browse/{path:path}",
    response_model=BrowseResponse,
    responses={
        200: {"description": "Browse page resolved"},
        409: {"model": ErrorResponse, "description": "Superseded by a newer navigation"},
        502: {"model": ErrorResponse, "description": "Listing service failed"},
        503: {"model": ErrorResponse, "description": "Catalog unavailable"},
    },
)
async def browse(
    path: str,
    query: BrowseQuery = Depends(get_browse_query),
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    registry: BrowseSessionRegistry = Depends(get_registry),
) -> BrowseResponse:
    """
    Resolve a browse URL and fetch its listing page.

    ``path`` is the part after ``/ads/``, e.g. ``thamel/mobile/mobile-phones``.

    Args:
        path: Browse path below /ads.
        query: Price, condition, sort and pagination parameters.
        x_session_id: Client session for latest-navigation-wins.
        registry: Injected session registry.

    Returns:
        Resolved context, filters, SEO data and ads.
    """
    result = await _run_browse(registry, path, query, x_session_id, include_listings=True)
    return build_browse_response(result)


@router.get(
    "/resolve/{path:path}",
    response_model=ResolveResponse,
    responses={
        200: {"description": "Browse URL resolved"},
        409: {"model": ErrorResponse, "description": "Superseded by a newer navigation"},
        503: {"model": ErrorResponse, "description": "Catalog unavailable"},
    },
)
async def resolve(
    path: str,
    query: BrowseQuery = Depends(get_browse_query),
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    registry: BrowseSessionRegistry = Depends(get_registry),
) -> ResolveResponse:
    """
    Resolve a browse URL without querying listings.

    Args:
        path: Browse path below /ads.
        query: Price, condition, sort and pagination parameters.
        x_session_id: Client session for latest-navigation-wins.
        registry: Injected session registry.

    Returns:
        Resolved context, compiled filters and SEO data.
    """
    result = await _run_browse(registry, path, query, x_session_id, include_listings=False)
    return build_resolve_response(result)


@router.post(
    "/catalog/refresh",
    response_model=CatalogStatsResponse,
    responses={
        503: {"model": ErrorResponse, "description": "Catalog unavailable"},
    },
)
async def refresh_catalog(
    registry: BrowseSessionRegistry = Depends(get_registry),
) -> CatalogStatsResponse:
    """
    Refetch the catalog and rebuild the hierarchy index.

    Returns:
        Node counts of the new index.
    """
    try:
        index = await registry.loader.load(force_refresh=True)
    except CatalogUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message,
        )

    logger.info("Catalog refreshed", **index.stats())
    return CatalogStatsResponse.from_index(index)


@router.get("/health")
async def health_check(
    registry: BrowseSessionRegistry = Depends(get_registry),
) -> dict:
    """
    Health check endpoint.

    Returns:
        Health status and catalog readiness.
    """
    return {
        "status": "healthy",
        "service": "browse-resolver",
        "catalog_ready": registry.loader.is_ready,
    }


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format.
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
