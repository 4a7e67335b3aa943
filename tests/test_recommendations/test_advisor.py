"""
Tests for sentiment_advisor/recommendations/advisor.py.

What we test
------------
advise():
  - Metrics and recommendations are built from the same sentiment mapping,
    including a jittered snapshot.
  - Empty portfolio → no recommendations, zeroed metrics.
  - Timestamp defaults to now; explicit timestamps are kept (as UTC).

build_payload():
  - Top-level keys ``recommendations``, ``portfolioMetrics``, ``timestamp``.
  - camelCase keys on nested models; enum values as plain strings.
  - Timestamp rendered as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.
  - Payload is JSON-serialisable.
"""

from __future__ import annotations

import json
import random
from datetime import datetime, timezone

import pytest

from sentiment_advisor.models.portfolio import PortfolioMetrics
from sentiment_advisor.recommendations.advisor import advise, build_payload
from sentiment_advisor.sentiment.perturbation import SentimentJitter
from sentiment_advisor.sentiment.snapshot import SentimentSnapshot

GENERATED_AT = datetime(2026, 10, 19, 15, 0, 0, tzinfo=timezone.utc)


class TestAdvise:
    def test_one_recommendation_per_holding(self, sample_holdings, sample_prices, tsla_aggregate):
        report = advise(sample_holdings, sample_prices, {"TSLA": tsla_aggregate})
        assert len(report.recommendations) == 3
        assert report.portfolio_metrics.holding_count == 3

    def test_empty_portfolio(self):
        report = advise([], {}, {}, generated_at=GENERATED_AT)
        assert report.recommendations == []
        assert report.portfolio_metrics == PortfolioMetrics.empty()

    def test_explicit_timestamp_kept(self, sample_holdings, sample_prices):
        report = advise(sample_holdings, sample_prices, {}, generated_at=GENERATED_AT)
        assert report.timestamp == GENERATED_AT

    def test_naive_timestamp_treated_as_utc(self, sample_holdings, sample_prices):
        report = advise(
            sample_holdings, sample_prices, {}, generated_at=datetime(2026, 10, 19, 15, 0, 0)
        )
        assert report.timestamp == GENERATED_AT

    def test_default_timestamp_is_aware(self, sample_holdings, sample_prices):
        report = advise(sample_holdings, sample_prices, {})
        assert report.timestamp.tzinfo is not None

    def test_jittered_snapshot_is_consistent(self, sample_holdings, sample_prices, make_records):
        snapshot = SentimentSnapshot.from_records(
            {
                "AAPL": make_records([0.7] * 8),
                "TSLA": make_records([0.1] * 8, negative=0.8, symbol="TSLA"),
            },
            jitter=SentimentJitter(rng=random.Random(5)),
        )
        report = advise(sample_holdings, sample_prices, snapshot)

        by_symbol = {r.symbol: r for r in report.recommendations}
        for symbol in ("AAPL", "TSLA"):
            assert by_symbol[symbol].sentiment.positive == snapshot[symbol].positive
            assert by_symbol[symbol].sentiment.negative == snapshot[symbol].negative

        expected_pos = (snapshot["AAPL"].positive + snapshot["TSLA"].positive) / 2
        assert report.portfolio_metrics.avg_sentiment.positive == pytest.approx(expected_pos)


class TestBuildPayload:
    @pytest.fixture
    def payload(self, sample_holdings, sample_prices, aapl_aggregate, tsla_aggregate):
        report = advise(
            sample_holdings,
            sample_prices,
            {"AAPL": aapl_aggregate, "TSLA": tsla_aggregate},
            generated_at=GENERATED_AT,
        )
        return build_payload(report)

    def test_top_level_keys(self, payload):
        assert set(payload) == {"recommendations", "portfolioMetrics", "timestamp"}

    def test_timestamp_format(self, payload):
        assert payload["timestamp"] == "2026-10-19T15:00:00.000Z"

    def test_recommendation_keys_are_camel_case(self, payload):
        rec = payload["recommendations"][0]
        for key in ("portfolioWeight", "profitLossPercent", "currentPrice", "purchasePrice"):
            assert key in rec
        assert "portfolio_weight" not in rec
        assert set(rec["sentiment"]) == {"positive", "negative", "trend"}

    def test_metrics_keys_are_camel_case(self, payload):
        metrics = payload["portfolioMetrics"]
        for key in (
            "totalValue", "totalCost", "totalProfitLoss", "totalProfitLossPercent",
            "concentrationRisk", "overallSentiment", "avgSentiment",
        ):
            assert key in metrics

    def test_enums_render_as_strings(self, payload):
        tsla = next(r for r in payload["recommendations"] if r["symbol"] == "TSLA")
        assert tsla["action"] == "SELL"
        assert tsla["priority"] == "HIGH"
        assert tsla["sentiment"]["trend"] == "stable"
        assert payload["portfolioMetrics"]["overallSentiment"] in {"bullish", "bearish", "neutral"}

    def test_json_serialisable(self, payload):
        assert json.loads(json.dumps(payload)) == payload
