"""
Recommendation output models.

``Recommendation`` is one BUY/SELL/HOLD decision for one holding, produced
once per computation by the rule cascade and never mutated afterwards.

``AdvisoryReport`` bundles the ranked recommendations with the portfolio
metrics they were computed alongside, plus the generation timestamp.  Its
wire shape is ``{recommendations, portfolioMetrics, timestamp}`` with
camelCase keys throughout (``model_dump(by_alias=True, mode="json")``).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from sentiment_advisor.models.portfolio import PortfolioMetrics
from sentiment_advisor.taxonomy.signal_taxonomy import (
    RecommendationAction,
    RecommendationPriority,
    SentimentTrend,
)
from sentiment_advisor.utils.time_utils import isoformat_z

_CAMEL = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class HoldingSentiment(BaseModel):
    """The sentiment inputs a recommendation was decided on."""

    model_config = _CAMEL

    positive: float
    negative: float
    trend: SentimentTrend


class Recommendation(BaseModel):
    """A trading action for one holding.

    Attributes:
        symbol: Ticker of the holding.
        action: ``BUY``, ``SELL`` or ``HOLD``.
        confidence: Score in [0, 100] from the matched rule.
        reasoning: Ordered, deterministic explanation lines.
        portfolio_weight: Position value as a percentage of the portfolio.
        profit_loss_percent: Unrealized P/L versus purchase price, in percent.
        priority: Bucket derived from ``confidence``.
        rule: Name of the cascade rule that matched.
        current_price: Price used for valuation (purchase price if no quote).
        purchase_price: Cost per unit.
        quantity: Units held.
        sentiment: Positive/negative shares and trend used by the cascade.
    """

    model_config = _CAMEL

    symbol: str
    action: RecommendationAction
    confidence: float
    reasoning: list[str]
    portfolio_weight: float
    profit_loss_percent: float
    priority: RecommendationPriority
    rule: str
    current_price: float
    purchase_price: float
    quantity: float
    sentiment: HoldingSentiment

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"confidence must be in [0, 100], got {v}.")
        return v

    @field_validator("reasoning")
    @classmethod
    def validate_reasoning_not_empty(cls, v: list[str]) -> list[str]:
        lines = [line.strip() for line in v if line and line.strip()]
        if not lines:
            raise ValueError("reasoning must contain at least one line.")
        return lines


class AdvisoryReport(BaseModel):
    """Ranked recommendations plus the portfolio metrics behind them."""

    model_config = _CAMEL

    recommendations: list[Recommendation]
    portfolio_metrics: PortfolioMetrics
    timestamp: datetime

    @field_serializer("timestamp")
    def serialize_timestamp(self, v: datetime) -> str:
        return isoformat_z(v)
