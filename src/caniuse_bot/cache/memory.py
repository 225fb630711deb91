"""In-process TTL cache store."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from caniuse_bot.cache.protocols import MISSING


class InMemoryCacheStore:
    """Dict-backed CacheStore with per-key absolute expiry.

    ``clock`` returns seconds on a monotonic scale; tests inject a fake
    one to move time forward. Entries are served while ``now < expiry``.
    """

    def __init__(
        self, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._clock = clock
        self._store: dict[str, tuple[Any, float]] = {}

    async def get(self, key: str) -> Any:
        entry = self._store.get(key)
        if entry is None:
            return MISSING
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._store.pop(key, None)
            return MISSING
        return value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        self._store[key] = (value, self._clock() + ttl)

    async def close(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
