"""TTL cache stores shared by the dataset layer."""

from __future__ import annotations

import logging

from caniuse_bot.cache.memory import InMemoryCacheStore
from caniuse_bot.cache.protocols import MISSING, CacheStore
from caniuse_bot.cache.redis_store import RedisCacheStore
from caniuse_bot.config import Settings

__all__ = [
    "MISSING",
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "create_cache_store",
]

logger = logging.getLogger(__name__)


def create_cache_store(settings: Settings) -> CacheStore:
    """Pick the cache backend from settings (Redis if a URL is set)."""
    if settings.redis_url:
        logger.info("event=cache_backend backend=redis")
        return RedisCacheStore(settings.redis_url)
    logger.info("event=cache_backend backend=memory")
    return InMemoryCacheStore()
