"""
Tests for sentiment_advisor/sentiment/perturbation.py.

What we test
------------
apply_offset():
  - Zero offset leaves a normalized triple unchanged.
  - Positive offset raises positive and lowers negative by inverse_ratio × offset.
  - Clamping at 1.0 still yields a triple summing to 1.

complete_triple():
  - Neutral is the remainder; positive and negative pass through unscaled.
  - positive + negative > 1 → both scaled to sum to 1, neutral 0.
  - Zero positive and negative → all neutral.

SentimentJitter:
  - Magnitude above 0.04 is rejected.
  - Draws stay within ±magnitude.
  - Same seed → same draws.
  - from_config(): None when disabled, seeded instance when enabled.
"""

from __future__ import annotations

import random

import pytest

from sentiment_advisor.config import SentimentConfig
from sentiment_advisor.sentiment.perturbation import (
    MAX_MAGNITUDE,
    SentimentJitter,
    apply_offset,
    complete_triple,
)


class TestApplyOffset:
    def test_zero_offset_is_identity(self):
        pos, neg, neu = apply_offset(0.6, 0.3, 0.0)
        assert (pos, neg, neu) == pytest.approx((0.6, 0.3, 0.1))

    def test_positive_offset_moves_negative_inversely(self):
        pos, neg, neu = apply_offset(0.5, 0.3, 0.04, inverse_ratio=0.6)
        assert pos == pytest.approx(0.54)
        assert neg == pytest.approx(0.3 - 0.024)
        assert pos + neg + neu == pytest.approx(1.0)

    def test_negative_offset(self):
        pos, neg, _ = apply_offset(0.5, 0.3, -0.04)
        assert pos < 0.5
        assert neg > 0.3

    def test_clamped_at_one(self):
        pos, neg, neu = apply_offset(0.99, 0.0, 0.04)
        assert pos == pytest.approx(1.0)
        assert neg == pytest.approx(0.0)
        assert neu == pytest.approx(0.0)

    def test_clamped_at_zero(self):
        pos, neg, neu = apply_offset(0.01, 0.9, -0.04)
        assert pos == pytest.approx(0.0)
        assert pos + neg + neu == pytest.approx(1.0)


class TestCompleteTriple:
    def test_neutral_takes_remainder(self):
        assert complete_triple(0.5, 0.2) == pytest.approx((0.5, 0.2, 0.3))

    def test_overfull_pair_is_scaled(self):
        pos, neg, neu = complete_triple(0.6, 0.45)
        assert pos == pytest.approx(0.6 / 1.05)
        assert neg == pytest.approx(0.45 / 1.05)
        assert neu == 0.0

    def test_empty_pair_is_all_neutral(self):
        assert complete_triple(0.0, 0.0) == (0.0, 0.0, 1.0)


class TestSentimentJitter:
    def test_rejects_magnitude_above_limit(self):
        with pytest.raises(ValueError, match="magnitude"):
            SentimentJitter(magnitude=0.05)

    def test_draws_within_bounds(self):
        jitter = SentimentJitter(rng=random.Random(42))
        draws = [jitter.draw() for _ in range(500)]
        assert all(-MAX_MAGNITUDE <= d <= MAX_MAGNITUDE for d in draws)

    def test_zero_magnitude_never_moves(self):
        jitter = SentimentJitter(magnitude=0.0, rng=random.Random(1))
        assert jitter.perturb(0.6, 0.3) == pytest.approx((0.6, 0.3, 0.1))

    def test_same_seed_same_draws(self):
        a = SentimentJitter(rng=random.Random(9))
        b = SentimentJitter(rng=random.Random(9))
        assert [a.draw() for _ in range(5)] == [b.draw() for _ in range(5)]

    def test_from_config_disabled_returns_none(self):
        assert SentimentJitter.from_config(SentimentConfig()) is None

    def test_from_config_enabled_uses_settings(self):
        cfg = SentimentConfig(jitter_enabled=True, jitter_magnitude=0.02, jitter_seed=3)
        jitter = SentimentJitter.from_config(cfg)
        assert jitter is not None
        assert jitter.magnitude == 0.02
        assert jitter.draw() == SentimentJitter(magnitude=0.02, rng=random.Random(3)).draw()
