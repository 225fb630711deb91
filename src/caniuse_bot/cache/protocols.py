"""Protocol-based cache store interface.

Stores satisfy this protocol structurally (no inheritance).
Test doubles can be plain classes matching the same signature.
"""

from __future__ import annotations

from typing import Any, Final, Protocol


class _Missing:
    """Sentinel type for a cache miss."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Returned by ``get`` on a miss, so empty strings and other falsy
# values remain cacheable.
MISSING: Final = _Missing()


class CacheStore(Protocol):
    async def get(self, key: str) -> Any: ...
    async def set(self, key: str, value: Any, ttl: int) -> None: ...
    async def close(self) -> None: ...
