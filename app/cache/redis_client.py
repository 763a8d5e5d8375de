"""
Redis client holding the access-token revocation list.
"""
import json
from typing import Optional, Any
from redis import asyncio as aioredis
from app.core.config import settings
from app.core.logging import logger


class RedisCache:
    """Redis client with connection pooling and JSON serialization."""

    def __init__(self):
        self._client: Optional[aioredis.Redis] = None

    def _get_client(self) -> aioredis.Redis:
        """Get or create Redis client with connection pooling."""
        if self._client is None:
            pool = aioredis.ConnectionPool.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                max_connections=20,
            )
            self._client = aioredis.Redis(connection_pool=pool)
            logger.info("Redis connection pool created")
        return self._client

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        """
        Set value in cache with expiration.

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            expire: Expiration time in seconds

        Returns:
            True if successful, False otherwise
        """
        try:
            await self._get_client().setex(key, expire, json.dumps(value, default=str))
            return True
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._get_client().exists(key))
        except Exception as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False


cache = RedisCache()
