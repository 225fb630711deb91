"""Outgoing-webhook endpoint.

The platform contract is "always 200": any failure in the pipeline is
logged server-side and answered with an empty body.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from caniuse_bot.api.app_state import AppState
from caniuse_bot.api.dependencies import get_app_state
from caniuse_bot.constants import ID_HEX_LENGTH, MatchOutcome
from caniuse_bot.resilience.errors import classify_error
from caniuse_bot.services.webhook_service import WebhookResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


def _to_response(result: WebhookResult) -> Response:
    if result.reply is not None:
        return JSONResponse(
            content=result.reply.model_dump(exclude_none=True)
        )
    if result.text is not None:
        return PlainTextResponse(result.text)
    return Response(status_code=200)


def _schedule_delivery(
    state: AppState, result: WebhookResult, request_id: str
) -> None:
    if result.message is None:
        return
    task = asyncio.create_task(
        state.webhook_service.deliver(result.message, request_id)
    )
    state.background_tasks.add(task)
    task.add_done_callback(state.background_tasks.discard)


@router.post("/")
async def outgoing_webhook(
    state: Annotated[AppState, Depends(get_app_state)],
    token: Annotated[str, Form()] = "",
    text: Annotated[str, Form()] = "",
    trigger_word: Annotated[str, Form()] = "",
    channel_id: Annotated[str, Form()] = "",
) -> Response:
    """Answer one outgoing-webhook call from the chat platform."""
    request_id = uuid.uuid4().hex[:ID_HEX_LENGTH]
    started = time.perf_counter()

    try:
        result = await state.webhook_service.handle(
            token=token,
            text=text,
            trigger_word=trigger_word,
            channel_id=channel_id,
        )
    except Exception as exc:
        logger.exception(
            "event=webhook_failed request_id=%s error_class=%s",
            request_id,
            classify_error(exc).value,
        )
        state.request_logger.log_error(
            request_id, "webhook", f"{type(exc).__name__}: {exc}"
        )
        state.request_logger.log_request(
            request_id,
            text,
            MatchOutcome.FAILED,
            (time.perf_counter() - started) * 1000,
        )
        return Response(status_code=200)

    _schedule_delivery(state, result, request_id)
    state.request_logger.log_request(
        request_id,
        result.keyword,
        result.outcome,
        (time.perf_counter() - started) * 1000,
    )
    return _to_response(result)
