"""Fuzzy matching and keyword resolution."""

from caniuse_bot.matching.fuzzy import is_match, similarity
from caniuse_bot.matching.resolver import (
    Ambiguous,
    FeatureResolver,
    MatchResult,
    NotFound,
    Resolved,
    match_feature,
)

__all__ = [
    "Ambiguous",
    "FeatureResolver",
    "MatchResult",
    "NotFound",
    "Resolved",
    "is_match",
    "match_feature",
    "similarity",
]
