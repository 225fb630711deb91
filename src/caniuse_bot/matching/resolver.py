"""Keyword → feature resolution: exact pass, then fuzzy pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from caniuse_bot.dataset.cache import DatasetCache
from caniuse_bot.dataset.models import Dataset, Feature
from caniuse_bot.matching.fuzzy import is_match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolved:
    key: str
    feature: Feature


@dataclass(frozen=True)
class Ambiguous:
    """Several fuzzy candidates, in the order the scan found them."""

    keys: tuple[str, ...]


@dataclass(frozen=True)
class NotFound:
    keyword: str


type MatchResult = Resolved | Ambiguous | NotFound


def normalize_keyword(keyword: str) -> str:
    return keyword.strip().lower()


def match_feature(dataset: Dataset, keyword: str) -> MatchResult:
    """Resolve a keyword against a dataset snapshot.

    The exact pass compares the key (case-sensitive) and the lowercased
    title; the first hit in dataset order wins and no fuzzy candidates
    are considered. Otherwise every feature whose key or lowercased
    title fuzzy-matches is a candidate.
    """
    keyword = normalize_keyword(keyword)

    for key, feature in dataset.features.items():
        if key == keyword or feature.title.lower() == keyword:
            return Resolved(key=key, feature=feature)

    candidates = [
        key
        for key, feature in dataset.features.items()
        if is_match(keyword, key) or is_match(keyword, feature.title.lower())
    ]

    if not candidates:
        return NotFound(keyword=keyword)
    if len(candidates) == 1:
        key = candidates[0]
        return Resolved(key=key, feature=dataset.features[key])
    return Ambiguous(keys=tuple(candidates))


class FeatureResolver:
    """Resolves keywords against the cached dataset."""

    def __init__(self, dataset_cache: DatasetCache) -> None:
        self._dataset_cache = dataset_cache

    async def resolve(self, keyword: str) -> MatchResult:
        """Raises FetchError if the dataset is unavailable."""
        dataset = await self._dataset_cache.get_dataset()
        result = match_feature(dataset, keyword)
        logger.debug(
            "event=keyword_resolved keyword=%r result=%s",
            keyword,
            type(result).__name__,
        )
        return result
