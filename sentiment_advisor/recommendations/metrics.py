"""
Portfolio metrics: totals, concentration risk and averaged sentiment.

Formulas
--------
    position_value          = price × quantity        (price defaults to purchase_price)
    cost_basis              = purchase_price × quantity
    total_value             = Σ position_value
    total_cost              = Σ cost_basis
    total_profit_loss       = total_value − total_cost
    total_profit_loss_pct   = total_profit_loss / total_cost × 100     (0 if total_cost == 0)
    concentration_risk      = (top-2 position_value) / total_value      (0 if total_value == 0)

Averaged sentiment
------------------
    avg_sentiment = mean (positive, negative, neutral) over holdings that have an
                    aggregate in the sentiment lookup; neutral triple if none do.
    overall       = "bearish"  if avg.negative > 0.5
                    "bullish"  if avg.positive > 0.5
                    "neutral"  otherwise

Bearish is checked first.  An empty portfolio yields ``PortfolioMetrics.empty()``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Union

from sentiment_advisor.models.portfolio import (
    Holding,
    PortfolioMetrics,
    PriceQuote,
    SentimentMix,
)
from sentiment_advisor.models.sentiment import SentimentAggregate
from sentiment_advisor.taxonomy.signal_taxonomy import MarketOutlook

PriceInput = Union[PriceQuote, float]

OUTLOOK_THRESHOLD = 0.5
CONCENTRATION_TOP_N = 2


@dataclass(frozen=True)
class PositionValuation:
    """Valuation of one holding at the price used for this computation.

    Attributes:
        holding:        The underlying Holding.
        price:          Price per unit actually used.
        price_source:   ``"quote"`` or ``"purchase_price"`` (no quote supplied).
        position_value: price × quantity.
        cost_basis:     purchase_price × quantity.
    """

    holding:        Holding
    price:          float
    price_source:   str
    position_value: float
    cost_basis:     float


def normalize_prices(prices: Mapping[str, PriceInput]) -> dict[str, float]:
    """Upper-case keys and unwrap ``PriceQuote`` objects to floats."""
    result: dict[str, float] = {}
    for symbol, value in prices.items():
        price = value.price if isinstance(value, PriceQuote) else float(value)
        result[symbol.strip().upper()] = price
    return result


def normalize_sentiments(
    sentiments: Mapping[str, SentimentAggregate],
) -> dict[str, SentimentAggregate]:
    return {symbol.strip().upper(): agg for symbol, agg in sentiments.items()}


def value_positions(
    holdings: Sequence[Holding],
    prices:   Mapping[str, PriceInput],
) -> list[PositionValuation]:
    """Value every holding, falling back to purchase price without a quote.

    Returns:
        One ``PositionValuation`` per holding, in input order.
    """
    lookup = normalize_prices(prices)
    valuations: list[PositionValuation] = []
    for holding in holdings:
        price = lookup.get(holding.symbol)
        source = "quote"
        if price is None:
            price, source = holding.purchase_price, "purchase_price"
        valuations.append(
            PositionValuation(
                holding=holding,
                price=price,
                price_source=source,
                position_value=price * holding.quantity,
                cost_basis=holding.purchase_price * holding.quantity,
            )
        )
    return valuations


def compute_portfolio_metrics(
    holdings:   Sequence[Holding],
    prices:     Mapping[str, PriceInput],
    sentiments: Mapping[str, SentimentAggregate],
) -> PortfolioMetrics:
    """Compute portfolio-wide totals and risk indicators.

    Args:
        holdings:   Positions to evaluate.
        prices:     Symbol → PriceQuote (or bare float price).
        sentiments: Symbol → SentimentAggregate (typically a SentimentSnapshot).

    Returns:
        ``PortfolioMetrics``; zeroed/neutral for an empty portfolio.
    """
    if not holdings:
        return PortfolioMetrics.empty()

    positions   = value_positions(holdings, prices)
    total_value = sum(p.position_value for p in positions)
    total_cost  = sum(p.cost_basis for p in positions)
    total_pl    = total_value - total_cost
    avg         = average_sentiment(holdings, sentiments)

    return PortfolioMetrics(
        total_value=total_value,
        total_cost=total_cost,
        total_profit_loss=total_pl,
        total_profit_loss_percent=(total_pl / total_cost * 100.0) if total_cost > 0 else 0.0,
        concentration_risk=concentration_risk(positions, total_value),
        overall_sentiment=classify_outlook(avg),
        avg_sentiment=avg,
        holding_count=len(holdings),
    )


def concentration_risk(
    positions:   Sequence[PositionValuation],
    total_value: float,
) -> float:
    """Share of ``total_value`` held in the two largest positions."""
    if total_value <= 0:
        return 0.0
    top = sorted((p.position_value for p in positions), reverse=True)[:CONCENTRATION_TOP_N]
    return sum(top) / total_value


def average_sentiment(
    holdings:   Sequence[Holding],
    sentiments: Mapping[str, SentimentAggregate],
) -> SentimentMix:
    """Mean sentiment triple over holdings that have an aggregate."""
    lookup = normalize_sentiments(sentiments)
    covered = [lookup[h.symbol] for h in holdings if h.symbol in lookup]
    if not covered:
        return SentimentMix.neutral_default()

    n = len(covered)
    return SentimentMix(
        positive=sum(a.positive for a in covered) / n,
        negative=sum(a.negative for a in covered) / n,
        neutral=sum(a.neutral for a in covered) / n,
    )


def classify_outlook(
    avg:       SentimentMix,
    threshold: float = OUTLOOK_THRESHOLD,
) -> MarketOutlook:
    if avg.negative > threshold:
        return MarketOutlook.BEARISH
    if avg.positive > threshold:
        return MarketOutlook.BULLISH
    return MarketOutlook.NEUTRAL
