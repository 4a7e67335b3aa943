"""Tests for Recommendation and AdvisoryReport models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from sentiment_advisor.models.portfolio import PortfolioMetrics
from sentiment_advisor.models.recommendation import (
    AdvisoryReport,
    HoldingSentiment,
    Recommendation,
)
from sentiment_advisor.taxonomy.signal_taxonomy import (
    RecommendationAction,
    RecommendationPriority,
    SentimentTrend,
)


def _recommendation(**overrides) -> Recommendation:
    fields = dict(
        symbol="AAPL",
        action=RecommendationAction.BUY,
        confidence=85.0,
        reasoning=["Strong positive sentiment (82.0%) and improving"],
        portfolio_weight=6.8,
        profit_loss_percent=-3.1,
        priority=RecommendationPriority.HIGH,
        rule="improving_room_to_grow",
        current_price=170.0,
        purchase_price=175.43,
        quantity=10,
        sentiment=HoldingSentiment(positive=0.82, negative=0.08, trend=SentimentTrend.IMPROVING),
    )
    fields.update(overrides)
    return Recommendation(**fields)


class TestRecommendation:
    def test_valid_construction(self):
        rec = _recommendation()
        assert rec.action == "BUY"
        assert rec.sentiment.trend == SentimentTrend.IMPROVING

    @pytest.mark.parametrize("confidence", [-0.1, 100.1])
    def test_confidence_out_of_range_raises(self, confidence):
        with pytest.raises(ValidationError, match="confidence"):
            _recommendation(confidence=confidence)

    def test_empty_reasoning_raises(self):
        with pytest.raises(ValidationError, match="reasoning"):
            _recommendation(reasoning=["", "   "])

    def test_reasoning_lines_are_stripped(self):
        rec = _recommendation(reasoning=["  Up 5.0%  ", "", "Hold"])
        assert rec.reasoning == ["Up 5.0%", "Hold"]

    def test_unknown_action_raises(self):
        with pytest.raises(ValidationError):
            _recommendation(action="SHORT")


class TestAdvisoryReport:
    def test_timestamp_serialised_with_z(self):
        report = AdvisoryReport(
            recommendations=[_recommendation()],
            portfolio_metrics=PortfolioMetrics.empty(),
            timestamp=datetime(2026, 10, 19, 15, 0, 0, 123456, tzinfo=timezone.utc),
        )
        assert report.model_dump(by_alias=True, mode="json")["timestamp"] == (
            "2026-10-19T15:00:00.123Z"
        )

    def test_offset_timestamp_converted_to_utc(self):
        eastern = timezone(timedelta(hours=-4))
        report = AdvisoryReport(
            recommendations=[],
            portfolio_metrics=PortfolioMetrics.empty(),
            timestamp=datetime(2026, 10, 19, 11, 0, 0, tzinfo=eastern),
        )
        assert report.model_dump(mode="json")["timestamp"] == "2026-10-19T15:00:00.000Z"
