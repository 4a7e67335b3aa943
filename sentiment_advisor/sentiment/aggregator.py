"""
Sentiment aggregation: reduces a symbol's recent scored documents into one
stable ``SentimentAggregate`` with a label and a directional trend.

Aggregation
-----------
    window     = newest ``window_size`` records (default 50), newest first
    positive   = mean(record.positive)
    negative   = mean(record.negative)
    neutral    = 1 - positive - negative   (absorbs any "mixed" share)
    positive + negative > 1  → both scaled down to sum to 1, neutral = 0

The label and the rule cascade read the raw means, so a mean positive of
exactly 0.5 stays NEUTRAL however the other shares are split.

No records → ``SentimentAggregate.neutral_default`` (1/3 each, stable, n=0).

Label (strict inequalities — an exact 0.5 stays NEUTRAL)
-------------------------------------------------------
    1. POSITIVE : positive > 0.5
    2. NEGATIVE : negative > 0.5
    3. NEUTRAL  : otherwise

Trend (positive share only)
---------------------------
    recent = records[0:10], older = records[10:20]
    fewer than 10 records, or fewer than 10 older records  → stable
    mean(recent) - mean(older) > 0.1                      → improving
    mean(older) - mean(recent) > 0.1                      → declining
    otherwise                                             → stable

Negative share is deliberately not trended.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Optional

from sentiment_advisor.config import SentimentConfig
from sentiment_advisor.models.sentiment import SentimentAggregate, SentimentRecord
from sentiment_advisor.sentiment.perturbation import SentimentJitter, complete_triple
from sentiment_advisor.taxonomy.signal_taxonomy import SentimentLabel, SentimentTrend

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = SentimentConfig()


def aggregate_sentiment(
    symbol:  str,
    records: Sequence[SentimentRecord],
    config:  Optional[SentimentConfig] = None,
    jitter:  Optional[SentimentJitter] = None,
) -> SentimentAggregate:
    """Reduce ``records`` for ``symbol`` into a single aggregate.

    Records for other symbols are ignored.  Records are re-sorted newest
    first (stable, so equal timestamps keep their supplied order) and
    truncated to ``config.window_size``.

    Args:
        symbol:  Ticker to aggregate.
        records: Scored documents, ideally already newest first.
        config:  Sentiment section of ``AppConfig``; defaults if omitted.
        jitter:  Optional perturbation; applied once, never to the
                 zero-record default.

    Returns:
        ``SentimentAggregate`` whose shares sum to 1.
    """
    cfg = config or _DEFAULT_CONFIG
    symbol = symbol.strip().upper()

    matching = [r for r in records if r.symbol == symbol]
    if len(matching) != len(records):
        logger.debug(
            "Ignored %d record(s) not attributed to %s",
            len(records) - len(matching), symbol,
        )

    window = sorted(matching, key=lambda r: r.timestamp, reverse=True)[: cfg.window_size]
    if not window:
        return SentimentAggregate.neutral_default(symbol)

    count = len(window)
    positive = sum(r.positive for r in window) / count
    negative = sum(r.negative for r in window) / count
    positive, negative, neutral = complete_triple(positive, negative)

    if jitter is not None:
        positive, negative, neutral = jitter.perturb(positive, negative)

    return SentimentAggregate(
        symbol=symbol,
        positive=positive,
        negative=negative,
        neutral=neutral,
        label=classify_label(positive, negative, cfg.label_threshold),
        trend=compute_trend(window, cfg.trend_window, cfg.trend_threshold),
        sample_size=count,
    )


def classify_label(
    positive:  float,
    negative:  float,
    threshold: float = 0.5,
) -> SentimentLabel:
    """Dominant tone; equality with ``threshold`` never counts as dominant."""
    if positive > threshold:
        return SentimentLabel.POSITIVE
    if negative > threshold:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def compute_trend(
    records:   Sequence[SentimentRecord],
    window:    int = 10,
    threshold: float = 0.1,
) -> SentimentTrend:
    """Compare mean positive share of the newest ``window`` records with the
    ``window`` records before them.

    Args:
        records:   Records ordered newest first.
        window:    Records per comparison window.
        threshold: Minimum difference in mean positive share.

    Returns:
        ``SentimentTrend``; ``STABLE`` whenever either window is incomplete.
    """
    if len(records) < window:
        return SentimentTrend.STABLE

    recent = records[:window]
    older  = records[window : 2 * window]
    if len(older) < window:
        return SentimentTrend.STABLE

    recent_avg = sum(r.positive for r in recent) / len(recent)
    older_avg  = sum(r.positive for r in older) / len(older)

    if recent_avg - older_avg > threshold:
        return SentimentTrend.IMPROVING
    if older_avg - recent_avg > threshold:
        return SentimentTrend.DECLINING
    return SentimentTrend.STABLE


def aggregate_by_symbol(
    records: Sequence[SentimentRecord],
    config:  Optional[SentimentConfig] = None,
    jitter:  Optional[SentimentJitter] = None,
) -> dict[str, SentimentAggregate]:
    """Group a mixed-symbol record list and aggregate each symbol once.

    Symbols appear in the result in order of first appearance.
    """
    grouped: dict[str, list[SentimentRecord]] = defaultdict(list)
    for record in records:
        grouped[record.symbol].append(record)

    return {
        symbol: aggregate_sentiment(symbol, symbol_records, config=config, jitter=jitter)
        for symbol, symbol_records in grouped.items()
    }
