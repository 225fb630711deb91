"""Bigram Dice-coefficient string similarity.

Each string is lowercased, trimmed and split into its overlapping
two-character pairs. The score is twice the number of pairs the two
strings share (each pair matched at most once) over the total number
of pairs. Keywords score above MATCH_THRESHOLD to count as a match.
"""

from __future__ import annotations

from collections import Counter

from caniuse_bot.constants import MATCH_THRESHOLD


def _normalize(text: str) -> str:
    return text.strip().lower()


def bigrams(text: str) -> list[str]:
    """Overlapping two-character pairs, in order (may repeat)."""
    return [text[i : i + 2] for i in range(len(text) - 1)]


def similarity(a: str, b: str) -> float:
    """Score two strings in [0, 1]; 1 means identical after normalizing.

    Strings shorter than two characters have no pairs, so they score 0
    unless they are identical.
    """
    a = _normalize(a)
    b = _normalize(b)
    if a == b:
        return 1.0
    pairs_a = bigrams(a)
    pairs_b = bigrams(b)
    if not pairs_a or not pairs_b:
        return 0.0
    shared = sum((Counter(pairs_a) & Counter(pairs_b)).values())
    return 2.0 * shared / (len(pairs_a) + len(pairs_b))


def is_match(a: str, b: str) -> bool:
    return similarity(a, b) > MATCH_THRESHOLD
