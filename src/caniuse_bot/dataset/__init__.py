"""caniuse dataset models and the TTL-cached dataset source."""

from caniuse_bot.dataset.cache import DatasetCache, FetchError
from caniuse_bot.dataset.models import Agent, Dataset, Feature, Link

__all__ = [
    "Agent",
    "Dataset",
    "DatasetCache",
    "Feature",
    "FetchError",
    "Link",
]
