"""Tests for bigram Dice similarity."""

from __future__ import annotations

import pytest

from caniuse_bot.matching.fuzzy import bigrams, is_match, similarity


class TestBigrams:
    def test_overlapping_pairs_in_order(self) -> None:
        assert bigrams("flex") == ["fl", "le", "ex"]

    def test_repeated_pairs_kept(self) -> None:
        assert bigrams("aaa") == ["aa", "aa"]

    def test_short_strings_have_no_pairs(self) -> None:
        assert bigrams("a") == []
        assert bigrams("") == []


class TestSimilarity:
    @pytest.mark.parametrize(
        "text", ["flexbox", "a", "CSS Grid", "  fetch  ", "ab"]
    )
    def test_identity_is_one(self, text: str) -> None:
        assert similarity(text, text) == 1.0

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("flexbo", "flexbox"),
            ("flexbo", "flex-wrap"),
            ("grid", "css-grid"),
            ("aaaa", "aa"),
            ("fetch", "x"),
        ],
    )
    def test_symmetric(self, a: str, b: str) -> None:
        assert similarity(a, b) == similarity(b, a)

    @pytest.mark.parametrize(
        ("a", "b"), [("a", "b"), ("a", "ab"), ("", "x"), ("x", "flexbox")]
    )
    def test_short_unequal_strings_score_zero(self, a: str, b: str) -> None:
        assert similarity(a, b) == 0.0

    def test_normalizes_case_and_whitespace(self) -> None:
        assert similarity("  FlexBox ", "flexbox") == 1.0

    def test_dice_over_bigrams(self) -> None:
        """flexbo: 5 pairs, flexbox: 6 pairs, 5 shared -> 10/11."""
        assert similarity("flexbo", "flexbox") == pytest.approx(10 / 11)

    def test_partial_overlap(self) -> None:
        """flexbo vs flex-wrap shares fl, le, ex -> 6/13."""
        assert similarity("flexbo", "flex-wrap") == pytest.approx(6 / 13)

    def test_each_pair_matched_once(self) -> None:
        """aaaa has three 'aa' pairs, aa has one: only one is shared."""
        assert similarity("aaaa", "aa") == pytest.approx(0.5)

    def test_disjoint_strings(self) -> None:
        assert similarity("fetch", "grid") == 0.0

    def test_range(self) -> None:
        score = similarity("css-grid", "grid layout")
        assert 0.0 <= score <= 1.0


class TestIsMatch:
    def test_above_threshold(self) -> None:
        assert is_match("flexbo", "flexbox") is True

    def test_threshold_is_strict(self) -> None:
        """Exactly 0.5 does not count as a match."""
        assert similarity("aaaa", "aa") == pytest.approx(0.5)
        assert is_match("aaaa", "aa") is False

    def test_below_threshold(self) -> None:
        assert is_match("flexbo", "flex-wrap") is False
