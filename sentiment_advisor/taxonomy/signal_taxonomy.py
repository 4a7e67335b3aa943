"""
Signal taxonomy for sentiment aggregates and portfolio recommendations.

Five small vocabularies describe everything the advisor emits:
  - ``SentimentLabel``         — the dominant tone of a symbol's coverage.
  - ``SentimentTrend``         — direction of change in positive share.
  - ``RecommendationAction``   — what to do with a holding.
  - ``RecommendationPriority`` — coarse urgency bucket from confidence.
  - ``MarketOutlook``          — portfolio-wide sentiment verdict.

Values are the exact strings existing report consumers expect (upper-case
labels/actions/priorities, lower-case trends/outlooks).

This module has NO imports from any other ``sentiment_advisor`` package.
"""

from enum import StrEnum


class SentimentLabel(StrEnum):
    """Dominant sentiment of a symbol's recent document window."""

    POSITIVE = "POSITIVE"
    """Mean positive share strictly above the label threshold."""

    NEGATIVE = "NEGATIVE"
    """Mean negative share strictly above the label threshold."""

    NEUTRAL = "NEUTRAL"
    """Neither share clears the threshold (including exact ties)."""


class SentimentTrend(StrEnum):
    """Change in mean positive share between two adjacent record windows."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class RecommendationAction(StrEnum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class RecommendationPriority(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class MarketOutlook(StrEnum):
    """Portfolio-level sentiment verdict derived from averaged sentiment."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
