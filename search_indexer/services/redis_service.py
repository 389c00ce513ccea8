"""Redis service for the record cache.

This module provides a centralized Redis client used as the fast cache in
front of the primary store: hydrated project and version records are kept
as JSON under ``projects:{id}`` / ``versions:{id}`` with a TTL.
"""

import logging
from typing import Any, Optional

import redis.asyncio as aioredis

from ..config import settings

logger = logging.getLogger(__name__)


class RedisService:
    """
    Async Redis service.

    Features:
    - Connection pooling with automatic reconnection
    - Batched reads (MGET) and writes (pipelined SETEX)
    """

    def __init__(self) -> None:
        """Initialize the Redis service (not connected yet)."""
        self._redis: Optional[aioredis.Redis] = None

    async def connect(self) -> None:
        """Initialize Redis connection with connection pooling."""
        self._redis = await aioredis.from_url(
            settings.redis_url,
            max_connections=settings.redis_max_connections,
            socket_timeout=settings.redis_socket_timeout,
            retry_on_timeout=settings.redis_retry_on_timeout,
            decode_responses=True,
        )
        # Test connection
        await self._redis.ping()
        logger.info("Redis connected successfully")

    async def disconnect(self) -> None:
        """Close Redis connection and cleanup resources."""
        if self._redis:
            await self._redis.close()
            self._redis = None
        logger.info("Redis disconnected")

    @property
    def client(self) -> aioredis.Redis:
        """Get Redis client instance."""
        if self._redis is None:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._redis

    @property
    def is_connected(self) -> bool:
        """Check if Redis is connected."""
        return self._redis is not None

    # =========================================================================
    # Caching Methods
    # =========================================================================

    async def get_many(self, keys: list[str]) -> list[Optional[str]]:
        """
        Get several raw string values in one round trip.

        Args:
            keys: The cache keys

        Returns:
            Values in the same order as keys, None for misses
        """
        if not keys:
            return []
        return await self.client.mget(keys)

    async def set_many(self, items: dict[str, str], ttl: int) -> None:
        """
        Store several raw string values with a shared TTL.

        Args:
            items: key -> already-serialized value
            ttl: Time-to-live in seconds
        """
        if not items:
            return
        pipe = self.client.pipeline(transaction=False)
        for key, value in items.items():
            pipe.setex(key, ttl, value)
        await pipe.execute()

    # =========================================================================
    # Health Check
    # =========================================================================

    async def health_check(self) -> dict[str, Any]:
        """
        Get Redis health status and stats.

        Returns:
            Dictionary with connection status and memory info
        """
        try:
            if not self.is_connected:
                return {"status": "disconnected"}

            info = await self.client.info("memory")
            return {
                "status": "healthy",
                "used_memory_human": info.get("used_memory_human", "unknown"),
            }
        except Exception as e:
            return {"status": "error", "error": str(e)}


# Global singleton instance
redis_service = RedisService()


__all__ = [
    "RedisService",
    "redis_service",
]
