"""
Request-level composition of portfolio metrics and recommendations.

``advise()`` is the single entry point for one logical request: the same
sentiment mapping feeds ``compute_portfolio_metrics`` and ``recommend`` so the
metrics and the per-holding decisions can never disagree about a symbol's
sentiment.  Callers that already showed aggregates to a user should wrap them
with ``SentimentSnapshot.from_aggregates()`` and pass that here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Optional

from sentiment_advisor.config import RecommendationConfig
from sentiment_advisor.models.portfolio import Holding
from sentiment_advisor.models.recommendation import AdvisoryReport
from sentiment_advisor.models.sentiment import SentimentAggregate
from sentiment_advisor.recommendations.engine import recommend
from sentiment_advisor.recommendations.metrics import PriceInput, compute_portfolio_metrics
from sentiment_advisor.utils.time_utils import ensure_utc, utcnow

logger = logging.getLogger(__name__)


def advise(
    holdings:     Sequence[Holding],
    prices:       Mapping[str, PriceInput],
    sentiments:   Mapping[str, SentimentAggregate],
    config:       Optional[RecommendationConfig] = None,
    generated_at: Optional[datetime] = None,
) -> AdvisoryReport:
    """Build the full advisory report for one portfolio.

    Args:
        holdings:     Positions to evaluate.
        prices:       Symbol → PriceQuote (or bare float price).
        sentiments:   Symbol → SentimentAggregate, shared by both computations.
        config:       Recommendation thresholds; defaults if omitted.
        generated_at: Report timestamp; now (UTC) if omitted.

    Returns:
        ``AdvisoryReport`` with ranked recommendations and portfolio metrics.
    """
    metrics = compute_portfolio_metrics(holdings, prices, sentiments)
    recommendations = recommend(holdings, prices, sentiments, metrics, config)

    logger.info(
        "Advised %d holding(s): total_value=%.2f overall=%s",
        len(recommendations), metrics.total_value, metrics.overall_sentiment,
    )

    return AdvisoryReport(
        recommendations=recommendations,
        portfolio_metrics=metrics,
        timestamp=ensure_utc(generated_at) if generated_at else utcnow(),
    )


def build_payload(report: AdvisoryReport) -> dict[str, Any]:
    """JSON-ready ``{recommendations, portfolioMetrics, timestamp}`` dict."""
    return report.model_dump(by_alias=True, mode="json")
