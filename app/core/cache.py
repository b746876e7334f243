"""
Cache management using Redis
Provides caching utilities with fallback when Redis is unavailable
"""

import asyncio
import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import ConnectionError, RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)


class CacheManager:
    """
    Redis cache manager with automatic fallback
    """

    def __init__(self):
        self.redis_client: Optional[redis.Redis] = None
        self.connected = False
        self._connection_attempts = 0
        self._max_connection_attempts = 3

    async def connect(self) -> bool:
        """
        Connect to Redis

        Returns:
            True if connected successfully, False otherwise
        """
        if not settings.REDIS_URL:
            logger.info("Redis caching is disabled")
            return False

        if self.connected:
            return True

        while self._connection_attempts < self._max_connection_attempts:
            try:
                self.redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

                # Test connection
                await self.redis_client.ping()
                self.connected = True
                logger.info("Connected to Redis successfully")
                return True

            except (RedisError, ConnectionError) as e:
                self._connection_attempts += 1
                logger.warning(
                    f"Failed to connect to Redis (attempt {self._connection_attempts}/{self._max_connection_attempts}): {e}"
                )

                if self._connection_attempts >= self._max_connection_attempts:
                    logger.error("Max Redis connection attempts reached. Cache will be disabled.")
                    self.connected = False
                    return False

                await asyncio.sleep(1)  # Wait before retry

        return False

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.connected = False
            logger.info("Disconnected from Redis")

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or Redis is unavailable
        """
        if not self.connected:
            return None

        try:
            value = await self.redis_client.get(key)
            if value is None:
                return None
            return json.loads(value)

        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            await self.delete(key)
            return None
        except (RedisError, ConnectionError) as e:
            logger.error(f"Redis get error for key {key}: {e}")
            self.connected = False
            return None

    async def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        """
        Set value in cache

        Args:
            key: Cache key
            value: JSON-serializable value to cache
            expire: Expiration time in seconds

        Returns:
            True if successful, False otherwise
        """
        if not self.connected:
            return False

        try:
            serialized = json.dumps(value, default=str)
            await self.redis_client.setex(key, expire or settings.CACHE_TTL, serialized)
            return True

        except (RedisError, ConnectionError) as e:
            logger.error(f"Redis set error for key {key}: {e}")
            self.connected = False
            return False

    async def delete(self, key: str) -> bool:
        """
        Delete value from cache

        Args:
            key: Cache key

        Returns:
            True if successful, False otherwise
        """
        if not self.connected:
            return False

        try:
            await self.redis_client.delete(key)
            return True

        except (RedisError, ConnectionError) as e:
            logger.error(f"Redis delete error for key {key}: {e}")
            self.connected = False
            return False

    async def clear_pattern(self, pattern: str) -> int:
        """
        Clear all keys matching pattern

        Args:
            pattern: Key pattern (e.g., "leaderboard:*")

        Returns:
            Number of keys deleted
        """
        if not self.connected:
            return 0

        try:
            keys = []
            async for key in self.redis_client.scan_iter(match=pattern):
                keys.append(key)

            if keys:
                return await self.redis_client.delete(*keys)
            return 0

        except (RedisError, ConnectionError) as e:
            logger.error(f"Redis clear pattern error for pattern {pattern}: {e}")
            self.connected = False
            return 0


# Global cache instance
cache_manager = CacheManager()


def cache_key(*args, **kwargs) -> str:
    """
    Generate cache key from arguments

    Args:
        *args: Positional arguments
        **kwargs: Keyword arguments

    Returns:
        Cache key string
    """
    parts = [str(arg) for arg in args]
    parts.extend([f"{k}:{v}" for k, v in sorted(kwargs.items())])
    return ":".join(parts)
