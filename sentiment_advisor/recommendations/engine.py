"""
Recommendation engine: one BUY/SELL/HOLD decision per holding, ranked.

Usage flow
----------
1. value_positions(holdings, prices)
   -> list[PositionValuation]  (missing quote → purchase price)

2. classify_holding(valuation, aggregate, total_value, config)
   -> Recommendation  (first matching rule in RULE_CASCADE)

3. rank_recommendations(recommendations)
   -> list[Recommendation]  (confidence descending, stable)

Priority buckets
----------------
    HIGH   : confidence > 80
    MEDIUM : confidence > 65
    LOW    : otherwise
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Optional

from sentiment_advisor.config import RecommendationConfig
from sentiment_advisor.models.portfolio import Holding, PortfolioMetrics
from sentiment_advisor.models.recommendation import HoldingSentiment, Recommendation
from sentiment_advisor.models.sentiment import SentimentAggregate
from sentiment_advisor.recommendations.metrics import (
    PositionValuation,
    PriceInput,
    compute_portfolio_metrics,
    normalize_sentiments,
    value_positions,
)
from sentiment_advisor.recommendations.rules import (
    RULE_CASCADE,
    Rule,
    derive_signals,
    evaluate_cascade,
)
from sentiment_advisor.taxonomy.signal_taxonomy import RecommendationPriority

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = RecommendationConfig()


def recommend(
    holdings:   Sequence[Holding],
    prices:     Mapping[str, PriceInput],
    sentiments: Mapping[str, SentimentAggregate],
    metrics:    Optional[PortfolioMetrics] = None,
    config:     Optional[RecommendationConfig] = None,
    rules:      Sequence[Rule] = RULE_CASCADE,
) -> list[Recommendation]:
    """Classify every holding and rank the results.

    Args:
        holdings:   Positions to classify.
        prices:     Symbol → PriceQuote (or bare float price).
        sentiments: Symbol → SentimentAggregate; pass the same mapping that
                    produced ``metrics`` so both views agree.
        metrics:    Portfolio metrics for the same inputs; computed here when
                    omitted.
        config:     Recommendation thresholds; defaults if omitted.
        rules:      Decision list to evaluate, ``RULE_CASCADE`` by default.

    Returns:
        One ``Recommendation`` per holding, sorted by confidence descending.
        Ties keep input order.  Empty input → ``[]``.
    """
    if not holdings:
        return []

    cfg = config or _DEFAULT_CONFIG
    if metrics is None:
        metrics = compute_portfolio_metrics(holdings, prices, sentiments)

    lookup = normalize_sentiments(sentiments)
    recommendations = []
    for valuation in value_positions(holdings, prices):
        symbol = valuation.holding.symbol
        aggregate = lookup.get(symbol)
        if aggregate is None:
            logger.debug("No sentiment aggregate for %s; using neutral default", symbol)
            aggregate = SentimentAggregate.neutral_default(symbol)
        recommendations.append(
            classify_holding(valuation, aggregate, metrics.total_value, cfg, rules)
        )

    return rank_recommendations(recommendations)


def classify_holding(
    valuation:   PositionValuation,
    aggregate:   SentimentAggregate,
    total_value: float,
    config:      Optional[RecommendationConfig] = None,
    rules:       Sequence[Rule] = RULE_CASCADE,
) -> Recommendation:
    """Run one valued holding through the cascade."""
    cfg = config or _DEFAULT_CONFIG
    holding = valuation.holding

    signals = derive_signals(
        symbol=holding.symbol,
        price=valuation.price,
        purchase_price=holding.purchase_price,
        position_value=valuation.position_value,
        total_value=total_value,
        positive=aggregate.positive,
        negative=aggregate.negative,
        trend=aggregate.trend,
        config=cfg,
    )
    rule, outcome = evaluate_cascade(signals, rules)
    confidence = round(outcome.confidence, 2)

    logger.debug(
        "%s matched rule %d (%s): %s @ %.2f",
        holding.symbol, rule.number, rule.name, outcome.action, confidence,
    )

    return Recommendation(
        symbol=holding.symbol,
        action=outcome.action,
        confidence=confidence,
        reasoning=list(outcome.reasoning),
        portfolio_weight=round(signals.portfolio_weight, 2),
        profit_loss_percent=round(signals.profit_loss_percent, 2),
        priority=assign_priority(confidence, cfg),
        rule=rule.name,
        current_price=valuation.price,
        purchase_price=holding.purchase_price,
        quantity=holding.quantity,
        sentiment=HoldingSentiment(
            positive=aggregate.positive,
            negative=aggregate.negative,
            trend=aggregate.trend,
        ),
    )


def assign_priority(
    confidence: float,
    config:     Optional[RecommendationConfig] = None,
) -> RecommendationPriority:
    cfg = config or _DEFAULT_CONFIG
    if confidence > cfg.high_priority_confidence:
        return RecommendationPriority.HIGH
    if confidence > cfg.medium_priority_confidence:
        return RecommendationPriority.MEDIUM
    return RecommendationPriority.LOW


def rank_recommendations(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """Sort by confidence descending; ``sorted`` is stable so ties keep order."""
    return sorted(recommendations, key=lambda r: -r.confidence)
