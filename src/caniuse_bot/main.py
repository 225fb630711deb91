"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from caniuse_bot.config import Settings
from caniuse_bot.logging_config import setup_logging

_settings = Settings()
setup_logging(_settings.log_level)

from fastapi import FastAPI  # noqa: E402

from caniuse_bot import __version__  # noqa: E402
from caniuse_bot.api.app_state import build_app_state  # noqa: E402
from caniuse_bot.api.routes import health, webhook  # noqa: E402

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # 1. Use module-level settings (single source of truth)
    settings = _settings

    # 2. Wire cache store, dataset cache, resolver, builder, sender
    state = build_app_state(settings)

    # 3. Store in app.state
    app.state.settings = settings
    app.state.typed = state

    # 4. Configuration warnings
    if not settings.outgoing_webhook_token:
        _logger.warning(
            "event=no_outgoing_token action=all_requests_rejected"
        )
    if not settings.incoming_webhook_url:
        _logger.warning(
            "event=no_incoming_webhook action=attachments_dropped"
        )

    yield

    # Cleanup
    await state.cache_store.close()


app = FastAPI(
    title="caniuse-bot",
    description="Chat webhook relay for caniuse browser-support lookups",
    version=__version__,
    lifespan=lifespan,
)

# Routes
app.include_router(health.router)
app.include_router(webhook.router)
