"""
Redis caching layer for Vehicles Service.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from shared.errors import CacheUnavailable
from .base import CacheStore


class RedisCacheStore(CacheStore):
    """CacheStore backed by a shared ``redis.asyncio`` client.

    The client is safe for concurrent use by many coroutines; one instance is
    meant to be created, started and stopped by whoever owns the process.
    """

    def __init__(
        self,
        redis_url: str,
        *,
        default_ttl: Optional[int] = None,
        socket_timeout: float = 5.0,
        client: Optional[redis.Redis] = None,
    ):
        self.redis_url = redis_url
        self.default_ttl = default_ttl
        self.socket_timeout = socket_timeout
        self.logger = get_logger("vehicles.cache.redis")
        self.redis: Optional[redis.Redis] = client

    async def start(self):
        """Start the Redis cache.

        A failed ping raises CacheUnavailable but keeps the client, which
        reconnects on its next command once Redis is reachable again.
        """
        if self.redis is None:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
                retry_on_timeout=True,
                health_check_interval=30
            )

        try:
            await self.redis.ping()
        except (RedisError, OSError) as e:
            self.logger.error("Failed to reach Redis on start", error=str(e))
            raise CacheUnavailable("start", message=str(e)) from e

        self.logger.info("Redis cache started")

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    def _client(self, operation: str, key: str) -> redis.Redis:
        if self.redis is None:
            raise CacheUnavailable(operation, key, "Redis cache not started")
        return self.redis

    async def get(self, key: str) -> Optional[str]:
        client = self._client("get", key)
        try:
            return await client.get(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailable("get", key, str(e)) from e
        except UnicodeDecodeError as e:
            # Payload written by another client is not UTF-8
            raise CacheUnavailable("get", key, f"Undecodable payload: {e}") from e

    async def set(self, key: str, payload: str, ttl_seconds: Optional[int] = None) -> None:
        client = self._client("set", key)
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        try:
            await client.set(key, payload, ex=ttl)
        except (RedisError, OSError) as e:
            raise CacheUnavailable("set", key, str(e)) from e

        self.logger.debug("Cache key written", key=key, ttl=ttl)

    async def delete(self, key: str) -> None:
        client = self._client("delete", key)
        try:
            removed = await client.delete(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailable("delete", key, str(e)) from e

        self.logger.debug("Cache key deleted", key=key, removed=removed)

    async def exists(self, key: str) -> bool:
        client = self._client("exists", key)
        try:
            return bool(await client.exists(key))
        except (RedisError, OSError) as e:
            raise CacheUnavailable("exists", key, str(e)) from e

    async def refresh_ttl(self, key: str, ttl_seconds: int) -> bool:
        client = self._client("refresh_ttl", key)
        try:
            # EXPIRE answers 0 for a missing key
            return bool(await client.expire(key, ttl_seconds))
        except (RedisError, OSError) as e:
            raise CacheUnavailable("refresh_ttl", key, str(e)) from e

    async def health_check(self) -> bool:
        """Check Redis health."""
        if self.redis is None:
            return False
        try:
            await self.redis.ping()
            return True
        except (RedisError, OSError):
            return False
