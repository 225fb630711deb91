"""Shared constants: single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON payloads,
cache keys, log lines) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class AttachmentColor(StrEnum):
    """Sidebar colors understood by the chat platform."""

    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


class MatchOutcome(StrEnum):
    """Outcome labels used in request logs."""

    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"
    LISTING = "listing"
    INVALID_TOKEN = "invalid_token"
    FAILED = "failed"


# ── Upstream Dataset ─────────────────────────────────────

DEFAULT_DATASET_URL = (
    "https://raw.githubusercontent.com/Fyrd/caniuse/main/data.json"
)
FEATURE_PAGE_URL = "https://caniuse.com/#feat={key}"
REQUIRED_DATASET_KEYS = ("data", "statuses", "agents")

# ── Cache ────────────────────────────────────────────────

CACHE_TTL_SECONDS = 24 * 60 * 60
CACHE_KEY_PREFIX = "caniuse"
CACHE_KEY_DATASET = f"{CACHE_KEY_PREFIX}:data"
# Changes on every fetch; lets a process reuse its parsed snapshot
CACHE_KEY_DATASET_VERSION = f"{CACHE_KEY_PREFIX}:data:version"
CACHE_KEY_FEATURE_LISTING = f"{CACHE_KEY_PREFIX}:features"


def status_cache_key(code: str) -> str:
    return f"{CACHE_KEY_PREFIX}:status:{code}"


def browser_cache_key(code: str) -> str:
    return f"{CACHE_KEY_PREFIX}:browser:{code}"


def payload_cache_key(feature_key: str) -> str:
    return f"{CACHE_KEY_PREFIX}:payload:{feature_key}"


# ── Matching ─────────────────────────────────────────────

MATCH_THRESHOLD = 0.5

# ── Attachment Rendering ─────────────────────────────────

GOOD_USAGE_THRESHOLD = 90
WARNING_USAGE_THRESHOLD = 50
FULL_SUPPORT_FLAG = "y"
VERSION_RANGE_SEPARATOR = "-"
MRKDWN_IN = ("text", "title", "fields", "fallback")

FIELD_BROWSER_SUPPORT = "Browser support"
FIELD_TOTAL_SUPPORT = "Total support"
FIELD_SPEC = "Spec"
FIELD_RESOURCES = "Resources"

# ── Circuit Breaker Configuration ────────────────────────

CB_DATASET_FAILURE_THRESHOLD = 3
CB_DATASET_RECOVERY_TIMEOUT = 60

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200
ID_HEX_LENGTH = 12
INVALID_TOKEN_REPLY = "Invalid token"

# ── Routes ───────────────────────────────────────────────

HEALTH_PATH = "/health"
