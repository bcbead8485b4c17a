"""
Redis catalog cache.

Read-through cache for the raw catalog trees. Uses msgpack for
serialization and jittered TTLs so that replicas do not refetch the
catalog at the same moment.
"""
import random
from typing import Any, Optional

import msgpack
import redis.asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from internal.infrastructure.metrics import CATALOG_CACHE_LOOKUPS
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


# Default TTL in seconds (15 minutes)
DEFAULT_TTL = 900
# Maximum jitter in seconds (2 minutes)
MAX_JITTER = 120

CATEGORIES_KEY = "catalog:categories:tree"
LOCATIONS_KEY = "catalog:locations:hierarchy"


class CatalogCache:
    """
    Redis cache for catalog payloads.

    Every failure is logged and reported as a miss; the catalog service
    stays the source of truth.
    """

    def __init__(
        self,
        redis_url: str,
        default_ttl: int = DEFAULT_TTL,
        max_jitter: int = MAX_JITTER,
        client: Optional[Redis] = None,
    ) -> None:
        """
        Initialize the catalog cache.

        Args:
            redis_url: Redis connection URL.
            default_ttl: Base TTL in seconds.
            max_jitter: Maximum random seconds added to the TTL.
            client: Pre-built Redis client (used by tests).
        """
        self._redis_url = redis_url
        self._default_ttl = default_ttl
        self._max_jitter = max_jitter
        self._redis: Optional[Redis] = client

    async def connect(self) -> None:
        """Connect to Redis."""
        self._redis = aioredis.from_url(
            self._redis_url,
            decode_responses=False,  # msgpack payloads are binary
        )
        await self._redis.ping()
        logger.info("Connected to Redis", url=self._redis_url)

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    def _ttl(self) -> int:
        return self._default_ttl + random.randint(0, self._max_jitter)

    async def _get(self, key: str, resource: str) -> Optional[Any]:
        if not self._redis:
            return None

        try:
            data = await self._redis.get(key)
        except RedisError as e:
            logger.error("Cache get error", key=key, error=str(e))
            return None

        if data is None:
            CATALOG_CACHE_LOOKUPS.labels(resource=resource, result="miss").inc()
            return None

        try:
            value = msgpack.unpackb(data, raw=False)
        except (ValueError, TypeError, msgpack.ExtraData) as e:
            logger.warning("Corrupt cache entry dropped", key=key, error=str(e))
            await self.invalidate(key)
            return None

        CATALOG_CACHE_LOOKUPS.labels(resource=resource, result="hit").inc()
        return value

    async def _set(self, key: str, value: Any) -> bool:
        if not self._redis:
            return False

        try:
            data = msgpack.packb(value, use_bin_type=True, default=str)
            await self._redis.setex(key, self._ttl(), data)
            return True
        except (RedisError, TypeError) as e:
            logger.error("Cache set error", key=key, error=str(e))
            return False

    async def invalidate(self, key: str) -> bool:
        """
        Invalidate a cache key.

        Returns:
            True if the key was deleted.
        """
        if not self._redis:
            return False

        try:
            return await self._redis.delete(key) > 0
        except RedisError as e:
            logger.error("Cache invalidate error", key=key, error=str(e))
            return False

    async def get_categories(self) -> Optional[list[dict]]:
        """Get the cached category tree payload."""
        return await self._get(CATEGORIES_KEY, "categories")

    async def set_categories(self, payload: list[dict]) -> bool:
        """Cache the category tree payload."""
        return await self._set(CATEGORIES_KEY, payload)

    async def get_locations(self) -> Optional[list[dict]]:
        """Get the cached location hierarchy payload."""
        return await self._get(LOCATIONS_KEY, "locations")

    async def set_locations(self, payload: list[dict]) -> bool:
        """Cache the location hierarchy payload."""
        return await self._set(LOCATIONS_KEY, payload)

    async def invalidate_catalog(self) -> None:
        """Drop both catalog payloads."""
        await self.invalidate(CATEGORIES_KEY)
        await self.invalidate(LOCATIONS_KEY)
