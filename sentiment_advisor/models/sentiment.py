"""
Sentiment models — per-document scores and per-symbol aggregates.

Two-stage design:
  1. ``SentimentRecord``    — one scored document (news article, tweet, post)
                              exactly as produced by the external scorer.
  2. ``SentimentAggregate`` — the reduced signal for one symbol over its most
                              recent record window.

Both models are frozen.  Aggregates are derived, never persisted here;
callers may cache them, and must reuse one aggregate per symbol for the
whole of a single request (see ``sentiment.snapshot``).
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from sentiment_advisor.taxonomy.signal_taxonomy import SentimentLabel, SentimentTrend
from sentiment_advisor.utils.time_utils import ensure_utc

VALID_SOURCES = frozenset({"news", "twitter", "reddit", "social", "manual"})

# Scorer output may leave a few points in a "mixed" bucket or drift on rounding
RECORD_SUM_TOLERANCE = 0.05
AGGREGATE_SUM_TOLERANCE = 1e-6


def _normalize_symbol(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("symbol must not be empty.")
    return v


class SentimentRecord(BaseModel):
    """A single scored document mentioning ``symbol``.

    Attributes:
        symbol: Ticker the document was attributed to (upper-cased).
        timestamp: When the document was scored (UTC; naive values are
            treated as UTC).
        positive: Positive share in [0, 1].
        negative: Negative share in [0, 1].
        neutral: Neutral share in [0, 1].
        mixed: Mixed share in [0, 1]; 0 when the scorer has no such bucket.
        source: Provenance, one of ``VALID_SOURCES``.
        source_id: Upstream identifier (tweet id, article URL), if known.
        title: Headline for news items, if known.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    timestamp: datetime
    positive: float
    negative: float
    neutral: float
    mixed: float = 0.0
    source: str = "news"
    source_id: Optional[str] = None
    title: Optional[str] = None

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        return _normalize_symbol(v)

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("positive", "negative", "neutral", "mixed")
    @classmethod
    def validate_share(cls, v: float) -> float:
        if math.isnan(v) or not 0.0 <= v <= 1.0:
            raise ValueError(f"Sentiment shares must be in [0.0, 1.0], got {v}.")
        return v

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        if v not in VALID_SOURCES:
            raise ValueError(f"Unknown source '{v}'. Must be one of {sorted(VALID_SOURCES)}.")
        return v

    @model_validator(mode="after")
    def validate_share_sum(self) -> "SentimentRecord":
        total = self.positive + self.negative + self.neutral + self.mixed
        if abs(total - 1.0) > RECORD_SUM_TOLERANCE:
            raise ValueError(
                f"Sentiment shares must sum to ~1.0 (±{RECORD_SUM_TOLERANCE}), got {total:.4f}."
            )
        return self


class SentimentAggregate(BaseModel):
    """Reduced sentiment for one symbol over its recent record window.

    Attributes:
        symbol: Ticker this aggregate describes.
        positive: Mean positive share.
        negative: Mean negative share.
        neutral: Remainder ``1 - positive - negative``.
        label: Dominant tone; see ``SentimentLabel``.
        trend: Direction of change in positive share; see ``SentimentTrend``.
        sample_size: Number of records the aggregate was computed from
            (0 for the neutral default).
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    positive: float
    negative: float
    neutral: float
    label: SentimentLabel = SentimentLabel.NEUTRAL
    trend: SentimentTrend = SentimentTrend.STABLE
    sample_size: int = 0

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        return _normalize_symbol(v)

    @field_validator("positive", "negative", "neutral")
    @classmethod
    def validate_share(cls, v: float) -> float:
        if math.isnan(v) or not 0.0 <= v <= 1.0:
            raise ValueError(f"Sentiment shares must be in [0.0, 1.0], got {v}.")
        return v

    @field_validator("sample_size")
    @classmethod
    def validate_sample_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("sample_size must be non-negative.")
        return v

    @model_validator(mode="after")
    def validate_share_sum(self) -> "SentimentAggregate":
        total = self.positive + self.negative + self.neutral
        if abs(total - 1.0) > AGGREGATE_SUM_TOLERANCE:
            raise ValueError(f"Aggregate shares must sum to 1.0, got {total!r}.")
        return self

    @classmethod
    def neutral_default(cls, symbol: str) -> "SentimentAggregate":
        """The fallback aggregate for a symbol with no coverage."""
        third = 1.0 / 3.0
        return cls(
            symbol=symbol,
            positive=third,
            negative=third,
            neutral=1.0 - 2.0 * third,
            label=SentimentLabel.NEUTRAL,
            trend=SentimentTrend.STABLE,
            sample_size=0,
        )
