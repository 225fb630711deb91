"""Typed application state: replaces untyped getattr() access."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx

from caniuse_bot.cache import CacheStore, create_cache_store
from caniuse_bot.config import Settings
from caniuse_bot.dataset.cache import DatasetCache
from caniuse_bot.logger import RequestLogger
from caniuse_bot.matching.resolver import FeatureResolver
from caniuse_bot.messages.attachment import AttachmentBuilder
from caniuse_bot.services.incoming_webhook import IncomingWebhookClient
from caniuse_bot.services.webhook_service import WebhookService


@dataclass
class AppState:
    """Typed container for app.state attributes."""

    settings: Settings
    cache_store: CacheStore
    dataset_cache: DatasetCache
    webhook_service: WebhookService
    request_logger: RequestLogger
    background_tasks: set[asyncio.Task[None]] = field(
        default_factory=lambda: set[asyncio.Task[None]]()
    )


def build_app_state(
    settings: Settings,
    *,
    cache_store: CacheStore | None = None,
    dataset_transport: httpx.AsyncBaseTransport | None = None,
    webhook_transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """Wire the lookup pipeline from settings.

    Transports and the cache store are injectable so tests can run the
    whole pipeline without network access.
    """
    store = cache_store or create_cache_store(settings)
    dataset_cache = DatasetCache(
        store, settings, transport=dataset_transport
    )
    service = WebhookService(
        settings=settings,
        dataset_cache=dataset_cache,
        resolver=FeatureResolver(dataset_cache),
        builder=AttachmentBuilder(dataset_cache),
        sender=IncomingWebhookClient(
            settings, transport=webhook_transport
        ),
    )
    return AppState(
        settings=settings,
        cache_store=store,
        dataset_cache=dataset_cache,
        webhook_service=service,
        request_logger=RequestLogger(
            log_dir=settings.log_dir, level=settings.log_level
        ),
    )
