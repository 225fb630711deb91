"""Redis-backed TTL cache store.

Values are JSON-encoded so any process sharing the Redis instance can
read them. Expiry is delegated to Redis (``SET ... EX ttl``).
"""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis

from caniuse_bot.cache.protocols import MISSING


class RedisCacheStore:
    """CacheStore adapter over ``redis.asyncio``."""

    def __init__(self, redis_url: str = "redis://localhost:6379") -> None:
        self._redis_url = redis_url
        self._client: aioredis.Redis | None = None

    async def _get_client(self) -> aioredis.Redis:
        if self._client is None:
            self._client = aioredis.from_url(  # type: ignore[no-untyped-call]
                self._redis_url, decode_responses=False
            )
        return self._client

    async def get(self, key: str) -> Any:
        """Return the decoded value, or MISSING if absent or expired."""
        client = await self._get_client()
        raw = await client.get(key)
        if raw is None:
            return MISSING
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        client = await self._get_client()
        encoded = json.dumps(value).encode("utf-8")
        await client.set(key, encoded, ex=ttl)

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
