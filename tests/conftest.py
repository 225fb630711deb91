"""Shared test fixtures: sample dataset, fake clock, mock transports."""

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from caniuse_bot.api.app_state import AppState, build_app_state
from caniuse_bot.cache.memory import InMemoryCacheStore
from caniuse_bot.config import Settings
from caniuse_bot.dataset.cache import DatasetCache

TEST_TOKEN = "test-token"
TEST_DATASET_URL = "https://data.example.test/caniuse/data.json"
TEST_WEBHOOK_URL = "https://hooks.example.test/services/T000/B000/XXXX"

# Key order matters: "flexbox" is scanned before "flex-wrap".
SAMPLE_DOCUMENT: dict[str, Any] = {
    "data": {
        "flexbox": {
            "title": "CSS Flexible Box Layout Module",
            "description": "Method of positioning elements in horizontal"
            " or vertical stacks.",
            "spec": "https://www.w3.org/TR/css3-flexbox/",
            "status": "cr",
            "usage_perc_y": 95.0,
            "links": [
                {
                    "url": "https://css-tricks.com/snippets/css/a-guide-to-flexbox/",
                    "title": "A guide to Flexbox",
                },
                {
                    "url": "https://philipwalton.github.io/solved-by-flexbox/",
                    "title": "Examples on how to solve common layout problems",
                },
            ],
            "stats": {
                "ie": {"9": "n", "10": "a x #2", "11": "a #3"},
                "firefox": {"2-21": "a x #1", "22-27": "y", "28": "y"},
                "chrome": {"4-20": "y x", "21-28": "y"},
                "safari": {"3.1-6": "a x #1", "6.1-8": "y x", "TP": "y"},
            },
        },
        "flex-wrap": {
            "title": "Flexbox wrap",
            "description": "Allows flex items to wrap onto multiple lines.",
            "spec": "https://www.w3.org/TR/css3-flexbox/#flex-wrap-property",
            "status": "cr",
            "usage_perc_y": 90.0,
            "links": [],
            "stats": {
                "firefox": {"2-27": "n", "28": "y"},
                "chrome": {"4-28": "y"},
            },
        },
        "fetch": {
            "title": "Fetch",
            "description": "A modern replacement for XMLHttpRequest.",
            "spec": "https://fetch.spec.whatwg.org/",
            "status": "ls",
            "usage_perc_y": 96.5,
            "links": [
                {
                    "url": "https://developer.mozilla.org/en-US/docs/Web/API/Fetch_API",
                    "title": "MDN Web Docs - Fetch API",
                },
            ],
            "stats": {
                "ie": {"9-11": "n"},
                "safari": {"3.1-10": "n", "10.1": "y"},
            },
        },
        "css-grid": {
            "title": "CSS Grid Layout (level 1)",
            "description": "Method of using a grid concept to lay out content.",
            "spec": None,
            "status": "cr",
            "usage_perc_y": 50.0,
            "links": [],
            "stats": {"ie": {"10-11": "p"}},
        },
    },
    "statuses": {
        "ls": "WHATWG Living Standard",
        "cr": "W3C Candidate Recommendation",
        "wd": "W3C Working Draft",
    },
    "agents": {
        "ie": {"browser": "IE", "versions": ["9", "10", "11"]},
        "firefox": {"browser": "Firefox", "versions": ["27", "28"]},
        "chrome": {"browser": "Chrome", "versions": ["27", "28"]},
        "safari": {"browser": "Safari", "versions": ["10", "10.1"]},
    },
}


def sample_document() -> dict[str, Any]:
    """Deep copy so tests can mutate freely."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


class FakeClock:
    """Monotonic clock the test moves forward by hand."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it answered."""

    def __init__(
        self, handler: Callable[[httpx.Request], httpx.Response]
    ) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) for r in self.requests]


def dataset_transport(
    document: Any = None, status_code: int = 200
) -> RecordingTransport:
    body = sample_document() if document is None else document
    return RecordingTransport(
        lambda request: httpx.Response(status_code, json=body)
    )


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "outgoing_webhook_token": TEST_TOKEN,
        "incoming_webhook_url": TEST_WEBHOOK_URL,
        "dataset_url": TEST_DATASET_URL,
        "log_dir": tmp_path / "logs",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


def setup_test_state(
    tmp_path: Path,
    *,
    dataset: RecordingTransport | None = None,
    webhook: RecordingTransport | None = None,
    **settings_overrides: Any,
) -> AppState:
    """Build an AppState wired to mock transports and a memory store."""
    return build_app_state(
        make_settings(tmp_path, **settings_overrides),
        cache_store=InMemoryCacheStore(),
        dataset_transport=dataset or dataset_transport(),
        webhook_transport=webhook
        or RecordingTransport(lambda request: httpx.Response(200)),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def upstream() -> RecordingTransport:
    return dataset_transport()


@pytest.fixture
def dataset_cache(
    store: InMemoryCacheStore,
    settings: Settings,
    upstream: RecordingTransport,
) -> DatasetCache:
    return DatasetCache(store, settings, transport=upstream)
