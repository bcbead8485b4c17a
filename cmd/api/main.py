"""
FastAPI Application Entry Point.

REST API server for the Browse Resolver Service.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from internal.domain.errors import CatalogUnavailableError
from internal.infrastructure.http_clients import CatalogClient, ListingClient
from internal.infrastructure.redis import CatalogCache
from internal.transport.http.middleware import MetricsMiddleware, RequestContextMiddleware
from internal.transport.http.v1.handlers import router, set_dependencies
from internal.usecase.browse_session import BrowseSessionRegistry
from internal.usecase.catalog_loader import CatalogLoader
from internal.usecase.resolve_context import ResolveContextUseCase
from internal.usecase.search_listings import SearchListingsUseCase
from pkg.logger.logger import get_logger, setup_logging


# Load environment variables
load_dotenv()

settings = get_settings()

# Setup logging
setup_logging(
    level=settings.log_level,
    json_format=settings.log_format == "json",
)

logger = get_logger(__name__)


async def _connect_cache(redis_url: str, ttl: int):
    if not redis_url:
        logger.info("REDIS_URL not set, catalog caching disabled")
        return None

    cache = CatalogCache(redis_url=redis_url, default_ttl=ttl)
    try:
        await cache.connect()
    except Exception as e:
        logger.warning("Failed to connect to Redis, catalog caching disabled", error=str(e))
        return None
    logger.info("Redis catalog cache connected")
    return cache


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    logger.info("Starting Browse Resolver API...")

    catalog_client = CatalogClient(
        base_url=settings.catalog_base_url,
        timeout=settings.catalog_timeout_seconds,
        search_timeout=settings.location_search_timeout_seconds,
        failure_threshold=settings.location_search_failure_threshold,
        recovery_timeout=settings.location_search_recovery_seconds,
    )
    listing_client = ListingClient(
        base_url=settings.listing_base_url,
        timeout=settings.listing_timeout_seconds,
    )
    cache = await _connect_cache(settings.redis_url, settings.catalog_cache_ttl_seconds)

    loader = CatalogLoader(source=catalog_client, cache=cache)
    registry = BrowseSessionRegistry(
        loader=loader,
        resolver=ResolveContextUseCase(location_searcher=catalog_client),
        listings=SearchListingsUseCase(listing_source=listing_client),
        max_sessions=settings.max_browse_sessions,
    )

    # Requests arriving before the index is ready wait on the loader
    try:
        await loader.load()
    except CatalogUnavailableError as e:
        logger.warning("Initial catalog load failed, will retry on first request", error=e.message)

    set_dependencies(registry)

    logger.info("Browse Resolver API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Browse Resolver API...")

    set_dependencies(None)
    await catalog_client.close()
    await listing_client.close()
    if cache:
        await cache.disconnect()

    logger.info("Browse Resolver API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Browse Resolver API",
    description="Resolves SEO browse URLs to catalog context and listing filters",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware
app.add_middleware(MetricsMiddleware)

# Request and session ID context for logging
app.add_middleware(RequestContextMiddleware)


# Include routers
app.include_router(router)


# Root endpoint
@app.get("/")
async def root() -> dict:
    """Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "status": "running",
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
    )
