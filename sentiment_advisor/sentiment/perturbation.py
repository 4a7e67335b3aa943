"""
Controlled sentiment jitter.

A small symmetric offset on the positive share, with a correlated inverse
offset on the negative share, keeps polled sentiment from looking frozen
between scorer runs without moving a classification materially::

    positive' = clamp(positive + offset)                  offset ∈ [-m, +m], m <= 0.04
    negative' = clamp(negative - offset * inverse_ratio)  inverse_ratio ≈ 0.6
    neutral'  = max(0, 1 - positive' - negative')
    positive' + negative' > 1 → both scaled to sum to 1, neutral' = 0

Randomness comes from an injected ``random.Random`` so tests (and seeded
production runs) are reproducible.  A jitter is applied at most once per
symbol per request; ``sentiment.snapshot`` is what enforces that.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sentiment_advisor.config import SentimentConfig

MAX_MAGNITUDE = 0.04


def apply_offset(
    positive:      float,
    negative:      float,
    offset:        float,
    inverse_ratio: float = 0.6,
) -> tuple[float, float, float]:
    """Shift a sentiment triple by ``offset`` and close it with ``complete_triple``.

    Args:
        positive:      Positive share before jitter.
        negative:      Negative share before jitter.
        offset:        Signed offset applied to the positive share.
        inverse_ratio: Fraction of ``offset`` subtracted from the negative share.

    Returns:
        ``(positive, negative, neutral)`` summing to 1.
    """
    return complete_triple(positive + offset, negative - offset * inverse_ratio)


def complete_triple(positive: float, negative: float) -> tuple[float, float, float]:
    """Close a positive/negative pair into a triple summing to 1.

    Both shares are clamped to [0, 1] and neutral takes the remainder.  Only
    when positive + negative exceeds 1 are the two scaled down (neutral 0).
    """
    pos = _clamp(positive)
    neg = _clamp(negative)
    total = pos + neg
    if total > 1.0:
        return pos / total, neg / total, 0.0
    return pos, neg, 1.0 - total


class SentimentJitter:
    """Draws bounded offsets from an injectable random source.

    Attributes:
        magnitude:     Maximum absolute offset on the positive share.
        inverse_ratio: Share of the offset mirrored onto the negative share.
        rng:           Random source; pass a seeded ``random.Random`` for
                       reproducible output.
    """

    def __init__(
        self,
        magnitude:     float = MAX_MAGNITUDE,
        inverse_ratio: float = 0.6,
        rng:           Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= magnitude <= MAX_MAGNITUDE:
            raise ValueError(f"magnitude must be in [0, {MAX_MAGNITUDE}], got {magnitude}.")
        self.magnitude = magnitude
        self.inverse_ratio = inverse_ratio
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: "SentimentConfig") -> Optional["SentimentJitter"]:
        """Build a jitter from config, or ``None`` when jitter is disabled."""
        if not config.jitter_enabled:
            return None
        return cls(
            magnitude=config.jitter_magnitude,
            inverse_ratio=config.jitter_inverse_ratio,
            rng=random.Random(config.jitter_seed),
        )

    def draw(self) -> float:
        return self.rng.uniform(-self.magnitude, self.magnitude)

    def perturb(self, positive: float, negative: float) -> tuple[float, float, float]:
        """Apply one freshly drawn offset to a positive/negative pair."""
        return apply_offset(positive, negative, self.draw(), self.inverse_ratio)


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))
