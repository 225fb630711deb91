"""Builds the rich attachment for a resolved feature."""

from __future__ import annotations

import logging
from decimal import Decimal

from caniuse_bot.constants import (
    FEATURE_PAGE_URL,
    FIELD_BROWSER_SUPPORT,
    FIELD_RESOURCES,
    FIELD_SPEC,
    FIELD_TOTAL_SUPPORT,
    FULL_SUPPORT_FLAG,
    GOOD_USAGE_THRESHOLD,
    VERSION_RANGE_SEPARATOR,
    WARNING_USAGE_THRESHOLD,
    AttachmentColor,
    payload_cache_key,
)
from caniuse_bot.dataset.cache import DatasetCache
from caniuse_bot.dataset.models import Feature, Link
from caniuse_bot.messages.schemas import Attachment, AttachmentField

logger = logging.getLogger(__name__)


def attachment_color(usage_perc_y: float) -> AttachmentColor:
    """Sidebar color from total support; thresholds are strict."""
    if usage_perc_y > GOOD_USAGE_THRESHOLD:
        return AttachmentColor.GOOD
    if usage_perc_y > WARNING_USAGE_THRESHOLD:
        return AttachmentColor.WARNING
    return AttachmentColor.DANGER


def feature_url(key: str) -> str:
    return FEATURE_PAGE_URL.format(key=key)


def version_label(version_range: str) -> str:
    """``"4-6"`` -> ``"4"``; ``"TP"`` -> ``"TP"``."""
    return version_range.split(VERSION_RANGE_SEPARATOR, 1)[0]


def first_supported_version(versions: dict[str, str]) -> str | None:
    """Label of the first range (in stats order) flagged as supported."""
    for version_range, flags in versions.items():
        if FULL_SUPPORT_FLAG in flags:
            return version_label(version_range)
    return None


def format_percent(value: float) -> str:
    """Shortest exact decimal form, no exponent: 95.0 -> "95%"."""
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}%"


def format_link(link: Link) -> str:
    return f"<{link.url}|{link.title}>"


class AttachmentBuilder:
    """Turns a resolved feature into a platform attachment.

    Display names for browsers and statuses come from the dataset cache;
    the finished attachment is cached per feature key with the same TTL.
    """

    def __init__(self, dataset_cache: DatasetCache) -> None:
        self._dataset_cache = dataset_cache

    async def build(self, key: str, feature: Feature) -> Attachment:
        async def _compute() -> dict[str, object]:
            attachment = await self._render(key, feature)
            return attachment.model_dump()

        payload = await self._dataset_cache.remember(
            payload_cache_key(key), _compute
        )
        return Attachment.model_validate(payload)

    async def browser_support_lines(self, feature: Feature) -> list[str]:
        """One ``"{browser} {version}"`` line per supporting browser.

        Sorted case-insensitively; browsers without a supported range
        are left out.
        """
        lines: list[str] = []
        for browser, versions in feature.stats.items():
            label = first_supported_version(versions)
            if label is None:
                continue
            name = await self._dataset_cache.browser_name(browser)
            lines.append(f"{name} {label}")
        return sorted(lines, key=str.lower)

    async def _spec_field(self, feature: Feature) -> AttachmentField | None:
        if not feature.spec or not feature.status:
            return None
        status = await self._dataset_cache.status_name(feature.status)
        return AttachmentField(
            title=FIELD_SPEC, value=f"<{feature.spec}|{status}>"
        )

    @staticmethod
    def _resources_field(feature: Feature) -> AttachmentField | None:
        if not feature.links:
            return None
        return AttachmentField(
            title=FIELD_RESOURCES,
            value="\n".join(format_link(link) for link in feature.links),
        )

    async def _render(self, key: str, feature: Feature) -> Attachment:
        url = feature_url(key)
        fields = [
            AttachmentField(
                title=FIELD_BROWSER_SUPPORT,
                value="\n".join(await self.browser_support_lines(feature)),
            ),
            AttachmentField(
                title=FIELD_TOTAL_SUPPORT,
                value=format_percent(feature.usage_perc_y),
            ),
        ]
        optional = (
            await self._spec_field(feature),
            self._resources_field(feature),
        )
        fields.extend(f for f in optional if f is not None)

        logger.debug("event=attachment_built key=%s", key)
        return Attachment(
            color=attachment_color(feature.usage_perc_y).value,
            title=feature.title,
            title_link=url,
            text=feature.description,
            fallback=f"{feature.title} ({url}): {feature.description}",
            fields=fields,
        )
