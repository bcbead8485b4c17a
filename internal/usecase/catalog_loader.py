"""
Catalog Loader Use Case.

Fetches the catalog trees (through the optional cache) and owns the
current HierarchyIndex. Resolution never runs against an empty index:
callers await ``ensure_index`` which loads the catalog on first use.
"""
import asyncio
import time
from typing import Optional, Protocol

from internal.domain.errors import CatalogUnavailableError
from internal.infrastructure.http_clients.catalog_client import (
    parse_categories,
    parse_locations,
)
from internal.infrastructure.metrics import INDEX_BUILD_DURATION, INDEXED_NODES
from internal.infrastructure.redis.cache import CatalogCache
from internal.usecase.hierarchy_index import HierarchyIndex, build_hierarchy_index
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class CatalogSource(Protocol):
    """Catalog service collaborator."""

    async def get_categories_raw(self) -> list[dict]:
        ...

    async def get_location_hierarchy_raw(self) -> list[dict]:
        ...


class CatalogLoader:
    """
    Owner of the current hierarchy index.

    A failed load keeps the previous index in place and propagates
    CatalogUnavailableError to the caller.
    """

    def __init__(
        self,
        source: CatalogSource,
        cache: Optional[CatalogCache] = None,
    ) -> None:
        """
        Initialize the loader.

        Args:
            source: Catalog service client.
            cache: Optional catalog cache.
        """
        self._source = source
        self._cache = cache
        self._index: Optional[HierarchyIndex] = None
        self._ready = asyncio.Event()
        self._lock = asyncio.Lock()

    @property
    def index(self) -> Optional[HierarchyIndex]:
        """Current index, or None before the first successful load."""
        return self._index

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    async def wait_until_ready(self, timeout: Optional[float] = None) -> HierarchyIndex:
        """
        Wait for another task to finish building the index.

        Raises:
            asyncio.TimeoutError: If the index is not ready in time.
            CatalogUnavailableError: If no index was built.
        """
        await asyncio.wait_for(self._ready.wait(), timeout=timeout)
        if self._index is None:
            raise CatalogUnavailableError("catalog", "index not built")
        return self._index

    async def ensure_index(self) -> HierarchyIndex:
        """
        Get the current index, loading the catalog if none was built yet.

        Raises:
            CatalogUnavailableError: If the catalog cannot be fetched.
        """
        if self._index is not None:
            return self._index
        return await self.load()

    async def load(self, force_refresh: bool = False) -> HierarchyIndex:
        """
        Fetch both catalog trees and build a fresh index.

        Concurrent callers share one load; without ``force_refresh`` an
        index built while waiting for the lock is reused.

        Args:
            force_refresh: Bypass the cache and rebuild even if ready.

        Returns:
            The new (or already current) index.

        Raises:
            CatalogUnavailableError: If the catalog cannot be fetched.
        """
        async with self._lock:
            if self._index is not None and not force_refresh:
                return self._index

            start_time = time.time()
            if force_refresh and self._cache is not None:
                await self._cache.invalidate_catalog()

            (categories_raw, categories_cached), (locations_raw, locations_cached) = (
                await asyncio.gather(
                    self._fetch_categories(),
                    self._fetch_locations(),
                )
            )

            try:
                index = build_hierarchy_index(
                    parse_locations(locations_raw),
                    parse_categories(categories_raw),
                )
            except CatalogUnavailableError:
                if self._cache is not None and (categories_cached or locations_cached):
                    logger.warning("Dropping unparseable cached catalog")
                    await self._cache.invalidate_catalog()
                raise

            # Only payloads that built an index are cached.
            if self._cache is not None:
                if not categories_cached:
                    await self._cache.set_categories(categories_raw)
                if not locations_cached:
                    await self._cache.set_locations(locations_raw)

            self._index = index
            self._ready.set()

            duration = time.time() - start_time
            INDEX_BUILD_DURATION.observe(duration)
            for kind, count in index.stats().items():
                INDEXED_NODES.labels(kind=kind).set(count)

            logger.info(
                "Catalog loaded",
                duration_seconds=round(duration, 3),
                **index.stats(),
            )
            return index

    async def _fetch_categories(self) -> tuple[list[dict], bool]:
        """Fetch the category tree; the flag tells whether it came from the cache."""
        if self._cache is not None:
            cached = await self._cache.get_categories()
            if cached is not None:
                return cached, True
        return await self._source.get_categories_raw(), False

    async def _fetch_locations(self) -> tuple[list[dict], bool]:
        if self._cache is not None:
            cached = await self._cache.get_locations()
            if cached is not None:
                return cached, True
        return await self._source.get_location_hierarchy_raw(), False
