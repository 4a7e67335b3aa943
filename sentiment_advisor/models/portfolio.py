"""
Portfolio models — holdings, price quotes and portfolio-wide metrics.

``Holding`` and ``PriceQuote`` are inputs supplied by external collaborators;
``PortfolioMetrics`` is derived by ``recommendations.metrics``.  All models are
frozen: a holding fetched for one computation must not change during it.

Report consumers expect camelCase keys, so ``SentimentMix`` and
``PortfolioMetrics`` carry a camelCase alias generator; dump with
``model_dump(by_alias=True)`` for the wire format.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from sentiment_advisor.taxonomy.signal_taxonomy import MarketOutlook


def _normalize_symbol(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("symbol must not be empty.")
    return v


class Holding(BaseModel):
    """A position in one symbol.

    ``purchase_price`` may be 0 (e.g. shares received at no cost); every
    downstream percentage treats a zero cost basis as 0% rather than failing.

    Attributes:
        symbol: Ticker (upper-cased).
        quantity: Units held, strictly positive.
        purchase_price: Average cost per unit, non-negative.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    symbol: str
    quantity: float
    purchase_price: float

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        return _normalize_symbol(v)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: float) -> float:
        if math.isnan(v) or v <= 0:
            raise ValueError(f"quantity must be > 0, got {v}.")
        return v

    @field_validator("purchase_price")
    @classmethod
    def validate_purchase_price(cls, v: float) -> float:
        if math.isnan(v) or v < 0:
            raise ValueError(f"purchase_price must be >= 0, got {v}.")
        return v


class PriceQuote(BaseModel):
    """Current price for one symbol, supplied once per computation."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        return _normalize_symbol(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if math.isnan(v) or v <= 0:
            raise ValueError(f"price must be > 0, got {v}.")
        return v


class SentimentMix(BaseModel):
    """A positive/negative/neutral triple averaged across holdings."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    positive: float
    negative: float
    neutral: float

    @classmethod
    def neutral_default(cls) -> "SentimentMix":
        third = 1.0 / 3.0
        return cls(positive=third, negative=third, neutral=1.0 - 2.0 * third)


class PortfolioMetrics(BaseModel):
    """Portfolio-wide totals and risk indicators.

    Attributes:
        total_value: Σ price × quantity.
        total_cost: Σ purchase_price × quantity.
        total_profit_loss: ``total_value - total_cost``.
        total_profit_loss_percent: P/L as a percentage of cost; 0 when the
            total cost is 0.
        concentration_risk: Share of value held in the two largest
            positions, in [0, 1]; 0 when the total value is 0.
        overall_sentiment: bullish / bearish / neutral verdict.
        avg_sentiment: Mean sentiment triple across holdings.
        holding_count: Number of holdings the metrics were computed from.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_value: float = 0.0
    total_cost: float = 0.0
    total_profit_loss: float = 0.0
    total_profit_loss_percent: float = 0.0
    concentration_risk: float = 0.0
    overall_sentiment: MarketOutlook = MarketOutlook.NEUTRAL
    avg_sentiment: SentimentMix = SentimentMix.neutral_default()
    holding_count: int = 0

    @field_validator("concentration_risk")
    @classmethod
    def validate_concentration(cls, v: float) -> float:
        # Allow float noise from summing positions in a different order
        if not -1e-9 <= v <= 1.0 + 1e-9:
            raise ValueError(f"concentration_risk must be in [0, 1], got {v}.")
        return min(1.0, max(0.0, v))

    @classmethod
    def empty(cls) -> "PortfolioMetrics":
        """Zeroed metrics for a portfolio with no holdings."""
        return cls()
