"""TTL-cached access to the upstream caniuse dataset.

The raw ``data.json`` document is cached under one key; derived values
(status names, browser names, the feature listing, prebuilt payloads)
are cached independently under their own keys with the same TTL and
computed lazily from the dataset on first miss.

Concurrent first misses may each fetch upstream. The fetch is
idempotent, so whichever write lands last is equivalent.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from circuitbreaker import (  # pyright: ignore[reportUnknownVariableType]
    CircuitBreaker,
    CircuitBreakerError,
)

from caniuse_bot.cache.protocols import MISSING, CacheStore
from caniuse_bot.config import Settings
from caniuse_bot.constants import (
    CACHE_KEY_DATASET,
    CACHE_KEY_DATASET_VERSION,
    CACHE_KEY_FEATURE_LISTING,
    CB_DATASET_FAILURE_THRESHOLD,
    CB_DATASET_RECOVERY_TIMEOUT,
    REQUIRED_DATASET_KEYS,
    browser_cache_key,
    status_cache_key,
)
from caniuse_bot.dataset.models import Dataset
from caniuse_bot.resilience.errors import classify_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchError(Exception):
    """The upstream dataset could not be fetched or parsed."""


def _is_upstream_failure(
    thrown_type: type, thrown_value: BaseException
) -> bool:
    """Count network, HTTP status and decode errors as breaker failures."""
    return issubclass(thrown_type, (httpx.HTTPError, ValueError))


def _validate_document(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        raise ValueError("dataset document is not a JSON object")
    missing = [k for k in REQUIRED_DATASET_KEYS if k not in document]
    if missing:
        raise ValueError(
            f"dataset document missing keys: {', '.join(missing)}"
        )
    return document


class DatasetCache:
    """Fetches the dataset on cache miss and serves derived lookups."""

    def __init__(
        self,
        store: CacheStore,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._store = store
        self._url = settings.dataset_url
        self._ttl = settings.cache_ttl_seconds
        self._timeout = settings.http_timeout_seconds
        self._transport = transport
        self._breaker = CircuitBreaker(  # pyright: ignore[reportUnknownMemberType]
            failure_threshold=CB_DATASET_FAILURE_THRESHOLD,
            recovery_timeout=CB_DATASET_RECOVERY_TIMEOUT,
            expected_exception=_is_upstream_failure,
            name="dataset_fetch",
        )
        # Parsed snapshot and the version marker it was cached under;
        # while the stored marker is unchanged the document is not
        # read back or re-parsed.
        self._snapshot_version: str | None = None
        self._snapshot: Dataset | None = None

    @property
    def ttl(self) -> int:
        return self._ttl

    async def get_dataset(self) -> Dataset:
        """Return the cached snapshot, fetching upstream on miss.

        Raises FetchError if the upstream is unreachable or its
        content cannot be parsed.
        """
        version = await self._store.get(CACHE_KEY_DATASET_VERSION)
        if (
            version is not MISSING
            and version == self._snapshot_version
            and self._snapshot is not None
        ):
            return self._snapshot

        cached = await self._store.get(CACHE_KEY_DATASET)
        if cached is not MISSING:
            try:
                dataset = Dataset.from_dict(cached)
            except (KeyError, TypeError, ValueError):
                logger.warning(
                    "event=cached_dataset_unreadable action=refetch",
                    exc_info=True,
                )
            else:
                if version is not MISSING:
                    self._remember_snapshot(version, dataset)
                return dataset

        document = await self._fetch_document()
        try:
            dataset = Dataset.from_dict(document)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error(
                "event=dataset_parse_failed url=%s error=%s",
                self._url,
                exc,
            )
            raise FetchError(f"dataset could not be parsed: {exc}") from exc

        version = uuid.uuid4().hex
        await self._store.set(CACHE_KEY_DATASET, document, self._ttl)
        await self._store.set(CACHE_KEY_DATASET_VERSION, version, self._ttl)
        self._remember_snapshot(version, dataset)
        logger.info(
            "event=dataset_refreshed features=%d ttl=%d",
            len(dataset.features),
            self._ttl,
        )
        return dataset

    async def status_name(self, code: str) -> str:
        """Human-readable status name, falling back to the code."""

        async def _compute() -> str:
            dataset = await self.get_dataset()
            return dataset.statuses.get(code, code)

        return await self.remember(status_cache_key(code), _compute)

    async def browser_name(self, code: str) -> str:
        """Browser display name, falling back to the code."""

        async def _compute() -> str:
            dataset = await self.get_dataset()
            agent = dataset.agents.get(code)
            return agent.browser if agent else code

        return await self.remember(browser_cache_key(code), _compute)

    async def feature_listing(self) -> str:
        """All feature keys, sorted, comma-separated."""

        async def _compute() -> str:
            dataset = await self.get_dataset()
            return ", ".join(dataset.sorted_keys())

        return await self.remember(CACHE_KEY_FEATURE_LISTING, _compute)

    async def remember(
        self, key: str, compute: Callable[[], Awaitable[T]]
    ) -> T:
        """Return the cached value for key, computing it on miss."""
        cached = await self._store.get(key)
        if cached is not MISSING:
            return cached  # type: ignore[no-any-return]
        value = await compute()
        await self._store.set(key, value, self._ttl)
        return value

    def _remember_snapshot(self, version: str, dataset: Dataset) -> None:
        self._snapshot_version = version
        self._snapshot = dataset

    async def _fetch_document(self) -> dict[str, Any]:
        """Circuit-breaker-protected GET of the upstream document."""
        breaker = self._breaker
        try:
            if breaker.opened:  # pyright: ignore[reportUnknownMemberType]
                raise CircuitBreakerError(breaker)  # pyright: ignore[reportUnknownArgumentType]
            with breaker:  # pyright: ignore[reportUnknownMemberType]
                async with httpx.AsyncClient(
                    timeout=self._timeout, transport=self._transport
                ) as client:
                    response = await client.get(self._url)
                    response.raise_for_status()
                    document = _validate_document(response.json())
        except CircuitBreakerError as exc:
            logger.warning(
                "event=circuit_open component=dataset_fetch action=fail_fast"
            )
            raise FetchError("dataset upstream circuit is open") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(
                "event=dataset_fetch_failed url=%s error_class=%s error=%s",
                self._url,
                classify_error(exc).value,
                exc,
            )
            raise FetchError(f"dataset fetch failed: {exc}") from exc
        return document
