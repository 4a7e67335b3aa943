"""Tests for the signal taxonomy enums (wire values are a public contract)."""

from __future__ import annotations

from sentiment_advisor.taxonomy.signal_taxonomy import (
    MarketOutlook,
    RecommendationAction,
    RecommendationPriority,
    SentimentLabel,
    SentimentTrend,
)


class TestWireValues:
    def test_labels_upper_case(self):
        assert [m.value for m in SentimentLabel] == ["POSITIVE", "NEGATIVE", "NEUTRAL"]

    def test_trends_lower_case(self):
        assert {m.value for m in SentimentTrend} == {"improving", "declining", "stable"}

    def test_actions(self):
        assert {m.value for m in RecommendationAction} == {"BUY", "SELL", "HOLD"}

    def test_priorities(self):
        assert {m.value for m in RecommendationPriority} == {"HIGH", "MEDIUM", "LOW"}

    def test_outlooks_lower_case(self):
        assert {m.value for m in MarketOutlook} == {"bullish", "bearish", "neutral"}

    def test_str_enum_compares_to_plain_string(self):
        assert RecommendationAction.SELL == "SELL"
        assert f"{SentimentTrend.IMPROVING}" == "improving"
