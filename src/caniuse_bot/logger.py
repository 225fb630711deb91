"""Structured JSON logger for webhook request and error tracking."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from caniuse_bot.constants import ERROR_TRUNCATION_CHARS
from caniuse_bot.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["RequestLogger", "LOG_FORMAT", "LOG_DATEFMT"]


class RequestLogger:
    """Structured JSON logger with request_id correlation."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("caniuse_bot.requests")
        self._logger.setLevel(getattr(logging, level.upper()))

        if not self._logger.handlers:
            handler = logging.FileHandler(log_dir / "webhook.log")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def log_request(
        self,
        request_id: str,
        keyword: str,
        outcome: str,
        duration_ms: float,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "request",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "keyword": keyword[:ERROR_TRUNCATION_CHARS],
                "outcome": outcome,
                "duration_ms": duration_ms,
            })
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )
