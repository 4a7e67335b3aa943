"""
Recommendation rule cascade: an ordered decision list over per-holding signals.

Signals (per holding)
---------------------
    profit_loss_percent = (price − purchase_price) / purchase_price × 100   (0 if purchase_price == 0)
    portfolio_weight    = position_value / total_value × 100                (0 if total_value == 0)
    overweight          = portfolio_weight > 25
    strong_neg          = negative > 0.55
    strong_pos          = positive > 0.55
    moderate_neg        = 0.45 < negative <= 0.55
    moderate_pos        = 0.45 < positive <= 0.55

Cascade (first match wins, later rules are never consulted)
-----------------------------------------------------------
    #   condition                                        action  confidence
    1   strong_neg ∧ P/L < −20                           SELL    min(95, 70 + neg×30)
    2   strong_neg ∧ P/L < −10                           SELL    min(90, 65 + neg×30)
    3   moderate_neg ∧ declining ∧ P/L < −5              SELL    75
    4   strong_neg ∧ P/L > 5                             SELL    85
    5   overweight ∧ P/L > 30 ∧ ¬strong_pos              SELL    80
    6   strong_pos ∧ −25 < P/L < −5                      BUY     min(90, 65 + pos×30)
    7   strong_pos ∧ improving ∧ weight < 15             BUY     85
    8   strong_pos ∧ 0 < P/L < 30 ∧ weight < 20          BUY     min(88, 70 + pos×20)
    9   moderate_pos ∧ improving ∧ P/L < 15              BUY     75
    10  P/L > 5 ∧ strong_pos ∧ weight >= 20              HOLD    85
    11  0 < P/L < 30 ∧ ¬strong_neg ∧ ¬strong_pos         HOLD    70
    12  |P/L| < 10 ∧ ¬strong_neg ∧ ¬strong_pos           HOLD    65
    13  default                                          HOLD    60

Order is load-bearing: rule 2 only ever sees P/L in [−20, −10) because rule 1
already took everything below −20.  Reorder only on purpose.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sentiment_advisor.config import RecommendationConfig
from sentiment_advisor.taxonomy.signal_taxonomy import RecommendationAction, SentimentTrend

# Profit/loss bands (percent) used by individual rules
SEVERE_LOSS_PCT      = -20.0
MODERATE_LOSS_PCT    = -10.0
DECLINE_LOSS_PCT     = -5.0
LOCK_IN_GAIN_PCT     = 5.0
REBALANCE_GAIN_PCT   = 30.0
DIP_FLOOR_PCT        = -25.0
DIP_CEILING_PCT      = -5.0
WINNER_CEILING_PCT   = 30.0
MOMENTUM_CEILING_PCT = 15.0
NEAR_ENTRY_PCT       = 10.0

# Portfolio weight bands (percent)
GROWTH_ROOM_WEIGHT_PCT = 15.0
WINNER_ROOM_WEIGHT_PCT = 20.0

DEFAULT_CONFIDENCE = 60.0


@dataclass(frozen=True)
class HoldingSignals:
    """Everything the cascade looks at for one holding.

    The boolean predicates are resolved once against ``RecommendationConfig``
    so individual rules never need the config.
    """

    symbol:              str
    profit_loss_percent: float
    portfolio_weight:    float
    positive:            float
    negative:            float
    trend:               SentimentTrend
    overweight:          bool
    strong_neg:          bool
    strong_pos:          bool
    moderate_neg:        bool
    moderate_pos:        bool


def derive_signals(
    symbol:         str,
    price:          float,
    purchase_price: float,
    position_value: float,
    total_value:    float,
    positive:       float,
    negative:       float,
    trend:          SentimentTrend,
    config:         RecommendationConfig,
) -> HoldingSignals:
    """Compute P/L, weight and boundary predicates for one holding."""
    pl_pct = (price - purchase_price) / purchase_price * 100.0 if purchase_price > 0 else 0.0
    weight = position_value / total_value * 100.0 if total_value > 0 else 0.0

    strong, moderate = config.strong_sentiment, config.moderate_sentiment
    return HoldingSignals(
        symbol=symbol,
        profit_loss_percent=pl_pct,
        portfolio_weight=weight,
        positive=positive,
        negative=negative,
        trend=trend,
        overweight=weight > config.overweight_pct,
        strong_neg=negative > strong,
        strong_pos=positive > strong,
        moderate_neg=moderate < negative <= strong,
        moderate_pos=moderate < positive <= strong,
    )


@dataclass(frozen=True)
class RuleOutcome:
    action:     RecommendationAction
    confidence: float
    reasoning:  tuple[str, ...]


@dataclass(frozen=True)
class Rule:
    """One entry of the decision list.

    Attributes:
        number:    1-based position in the cascade.
        name:      Stable identifier reported on the recommendation.
        predicate: Whether the rule applies to the given signals.
        build:     Produces the outcome once the predicate has matched.
    """

    number:    int
    name:      str
    predicate: Callable[[HoldingSignals], bool]
    build:     Callable[[HoldingSignals], RuleOutcome]

    def matches(self, signals: HoldingSignals) -> bool:
        return self.predicate(signals)


def _pct(share: float) -> str:
    return f"{share * 100:.1f}%"


# ── Sell rules ────────────────────────────────────────────────────────────────

def _severe_loss_exit(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.SELL,
        min(95.0, 70.0 + s.negative * 30.0),
        (
            f"Strong negative sentiment ({_pct(s.negative)})",
            f"Down {abs(s.profit_loss_percent):.1f}% from purchase price",
            "Exit to limit further losses",
        ),
    )


def _cut_losses(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.SELL,
        min(90.0, 65.0 + s.negative * 30.0),
        (
            f"Strong negative sentiment ({_pct(s.negative)})",
            f"Down {abs(s.profit_loss_percent):.1f}% from purchase price",
            "Cut losses before sentiment drives a further decline",
        ),
    )


def _declining_while_down(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.SELL,
        75.0,
        (
            f"Sentiment trend declining ({_pct(s.negative)} negative)",
            f"Already down {abs(s.profit_loss_percent):.1f}%",
            "Exit before conditions worsen",
        ),
    )


def _lock_in_gains(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.SELL,
        85.0,
        (
            f"Strong negative sentiment ({_pct(s.negative)})",
            f"Up {s.profit_loss_percent:.1f}% from purchase price",
            "Lock in gains before a sentiment-driven decline",
        ),
    )


def _rebalance_winner(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.SELL,
        80.0,
        (
            f"Position is {s.portfolio_weight:.1f}% of the portfolio",
            f"Up {s.profit_loss_percent:.1f}% from purchase price",
            "Take partial profits to reduce concentration",
        ),
    )


# ── Buy rules ─────────────────────────────────────────────────────────────────

def _buy_the_dip(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.BUY,
        min(90.0, 65.0 + s.positive * 30.0),
        (
            f"Strong positive sentiment ({_pct(s.positive)})",
            f"Trading {abs(s.profit_loss_percent):.1f}% below purchase price",
            "Opportunity to average down",
        ),
    )


def _improving_room_to_grow(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.BUY,
        85.0,
        (
            f"Strong positive sentiment ({_pct(s.positive)}) and improving",
            f"Only {s.portfolio_weight:.1f}% of the portfolio",
            "Room to increase the position",
        ),
    )


def _add_to_winner(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.BUY,
        min(88.0, 70.0 + s.positive * 20.0),
        (
            f"Strong positive sentiment ({_pct(s.positive)})",
            f"Up {s.profit_loss_percent:.1f}% at {s.portfolio_weight:.1f}% of the portfolio",
            "Add to a winning position",
        ),
    )


def _building_momentum(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.BUY,
        75.0,
        (
            f"Moderately positive sentiment ({_pct(s.positive)}) and improving",
            f"Profit/loss {s.profit_loss_percent:+.1f}%",
            "Momentum is building",
        ),
    )


# ── Hold rules ────────────────────────────────────────────────────────────────

def _well_sized_winner(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.HOLD,
        85.0,
        (
            f"Up {s.profit_loss_percent:.1f}% with strong positive sentiment ({_pct(s.positive)})",
            f"Already {s.portfolio_weight:.1f}% of the portfolio",
            "Well sized; let the position run",
        ),
    )


def _modest_gain(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.HOLD,
        70.0,
        (
            f"Up {s.profit_loss_percent:.1f}% from purchase price",
            "Sentiment is neutral",
            "Let the gain develop",
        ),
    )


def _near_entry(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.HOLD,
        65.0,
        (
            f"Near entry price ({s.profit_loss_percent:+.1f}%)",
            "No clear sentiment signal",
            "Wait for a clearer trend",
        ),
    )


def _monitor(s: HoldingSignals) -> RuleOutcome:
    return RuleOutcome(
        RecommendationAction.HOLD,
        DEFAULT_CONFIDENCE,
        (
            f"Profit/loss {s.profit_loss_percent:+.1f}% at {s.portfolio_weight:.1f}% of the portfolio",
            f"Sentiment {_pct(s.positive)} positive / {_pct(s.negative)} negative, trend {s.trend}",
            "No decisive signal; monitor the position",
        ),
    )


RULE_CASCADE: tuple[Rule, ...] = (
    Rule(1, "severe_loss_exit",
         lambda s: s.strong_neg and s.profit_loss_percent < SEVERE_LOSS_PCT,
         _severe_loss_exit),
    Rule(2, "cut_losses",
         lambda s: s.strong_neg and s.profit_loss_percent < MODERATE_LOSS_PCT,
         _cut_losses),
    Rule(3, "declining_while_down",
         lambda s: (
             s.moderate_neg
             and s.trend == SentimentTrend.DECLINING
             and s.profit_loss_percent < DECLINE_LOSS_PCT
         ),
         _declining_while_down),
    Rule(4, "lock_in_gains",
         lambda s: s.strong_neg and s.profit_loss_percent > LOCK_IN_GAIN_PCT,
         _lock_in_gains),
    Rule(5, "rebalance_winner",
         lambda s: s.overweight and s.profit_loss_percent > REBALANCE_GAIN_PCT and not s.strong_pos,
         _rebalance_winner),
    Rule(6, "buy_the_dip",
         lambda s: s.strong_pos and DIP_FLOOR_PCT < s.profit_loss_percent < DIP_CEILING_PCT,
         _buy_the_dip),
    Rule(7, "improving_room_to_grow",
         lambda s: (
             s.strong_pos
             and s.trend == SentimentTrend.IMPROVING
             and s.portfolio_weight < GROWTH_ROOM_WEIGHT_PCT
         ),
         _improving_room_to_grow),
    Rule(8, "add_to_winner",
         lambda s: (
             s.strong_pos
             and 0.0 < s.profit_loss_percent < WINNER_CEILING_PCT
             and s.portfolio_weight < WINNER_ROOM_WEIGHT_PCT
         ),
         _add_to_winner),
    Rule(9, "building_momentum",
         lambda s: (
             s.moderate_pos
             and s.trend == SentimentTrend.IMPROVING
             and s.profit_loss_percent < MOMENTUM_CEILING_PCT
         ),
         _building_momentum),
    Rule(10, "well_sized_winner",
         lambda s: (
             s.profit_loss_percent > LOCK_IN_GAIN_PCT
             and s.strong_pos
             and s.portfolio_weight >= WINNER_ROOM_WEIGHT_PCT
         ),
         _well_sized_winner),
    Rule(11, "modest_gain",
         lambda s: (
             0.0 < s.profit_loss_percent < WINNER_CEILING_PCT
             and not s.strong_neg
             and not s.strong_pos
         ),
         _modest_gain),
    Rule(12, "near_entry",
         lambda s: (
             abs(s.profit_loss_percent) < NEAR_ENTRY_PCT
             and not s.strong_neg
             and not s.strong_pos
         ),
         _near_entry),
    Rule(13, "monitor", lambda s: True, _monitor),
)


def evaluate_cascade(
    signals: HoldingSignals,
    rules:   Sequence[Rule] = RULE_CASCADE,
) -> tuple[Rule, RuleOutcome]:
    """Return the first rule whose predicate holds, with its outcome.

    Raises:
        ValueError: If no rule matches (only possible with a custom ``rules``
            sequence lacking a catch-all).
    """
    for rule in rules:
        if rule.matches(signals):
            return rule, rule.build(signals)
    raise ValueError(f"No rule matched holding {signals.symbol!r}.")
