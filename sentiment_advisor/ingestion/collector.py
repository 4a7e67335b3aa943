"""
Input collection for one advisory request.

``collect_inputs()`` pulls holdings, prices and sentiment from a
``MarketDataSource`` and freezes the sentiment view into a single
``SentimentSnapshot`` for the whole request.

Degradation rules
-----------------
    holdings lookup fails                 → DataSourceError propagates (nothing to advise on)
    price lookup fails for a symbol       → no quote; engine values it at purchase price
    sentiment lookup fails for a symbol   → no aggregate; engine uses the neutral default

Every degraded symbol is logged at WARNING and listed in
``PortfolioInputs.degraded_symbols``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional

from sentiment_advisor.config import SentimentConfig
from sentiment_advisor.ingestion.base import DataSourceError, MarketDataSource
from sentiment_advisor.models.portfolio import Holding, PriceQuote
from sentiment_advisor.models.sentiment import SentimentAggregate, SentimentRecord
from sentiment_advisor.sentiment.perturbation import SentimentJitter
from sentiment_advisor.sentiment.snapshot import SentimentSnapshot

logger = logging.getLogger(__name__)


@dataclass
class PortfolioInputs:
    """Everything the core needs for one portfolio, fetched once.

    Attributes:
        portfolio_ref:    Portfolio the holdings belong to.
        holdings:         Positions, in source order.
        prices:           Symbol → quote for symbols that have one.
        snapshot:         The request's sentiment view.
        degraded_symbols: Symbols whose price or sentiment lookup failed.
    """

    portfolio_ref:    str
    holdings:         list[Holding]
    prices:           dict[str, PriceQuote]
    snapshot:         SentimentSnapshot
    degraded_symbols: list[str] = field(default_factory=list)


def collect_inputs(
    source:        MarketDataSource,
    portfolio_ref: str,
    config:        Optional[SentimentConfig] = None,
    jitter:        Optional[SentimentJitter] = None,
    sentiments:    Optional[Mapping[str, SentimentAggregate]] = None,
) -> PortfolioInputs:
    """Fetch and freeze the inputs for ``portfolio_ref``.

    Args:
        source:        Collaborator providing holdings, prices and records.
        portfolio_ref: Portfolio to advise on.
        config:        Sentiment section of ``AppConfig``; defaults if omitted.
        jitter:        Optional perturbation for freshly computed aggregates.
        sentiments:    Aggregates the caller already holds.  When given they
                       are used verbatim and no sentiment records are fetched.

    Returns:
        ``PortfolioInputs``.

    Raises:
        DataSourceError: If the holdings themselves cannot be fetched.
    """
    cfg = config or SentimentConfig()
    holdings = source.get_holdings(portfolio_ref)
    symbols = list(dict.fromkeys(h.symbol for h in holdings))
    degraded: list[str] = []

    prices: dict[str, PriceQuote] = {}
    for symbol in symbols:
        try:
            quote = source.get_current_price(symbol)
        except DataSourceError as exc:
            logger.warning(
                "Price lookup failed for %s; using purchase price: %s", symbol, exc,
                extra={"symbol": symbol},
            )
            _mark(degraded, symbol)
            continue
        if quote is not None:
            prices[symbol] = quote

    if sentiments is not None:
        snapshot = SentimentSnapshot.from_aggregates(sentiments)
        logger.info("Using %d caller-supplied sentiment aggregate(s)", len(snapshot))
    else:
        snapshot, failed = collect_sentiment(source, symbols, config=cfg, jitter=jitter)
        for symbol in failed:
            _mark(degraded, symbol)

    return PortfolioInputs(
        portfolio_ref=portfolio_ref,
        holdings=holdings,
        prices=prices,
        snapshot=snapshot,
        degraded_symbols=degraded,
    )


def collect_sentiment(
    source:  MarketDataSource,
    symbols: Sequence[str],
    config:  Optional[SentimentConfig] = None,
    jitter:  Optional[SentimentJitter] = None,
) -> tuple[SentimentSnapshot, list[str]]:
    """Fetch recent records per symbol and aggregate each exactly once.

    Returns:
        ``(snapshot, failed_symbols)``.  Failed symbols are absent from the
        snapshot, so consumers fall back to the neutral default.
    """
    cfg = config or SentimentConfig()
    records_by_symbol: dict[str, list[SentimentRecord]] = {}
    failed: list[str] = []
    for symbol in dict.fromkeys(s.strip().upper() for s in symbols):
        try:
            records_by_symbol[symbol] = source.get_recent_sentiment_records(
                symbol, limit=cfg.window_size
            )
        except DataSourceError as exc:
            logger.warning(
                "Sentiment lookup failed for %s; using neutral default: %s", symbol, exc,
                extra={"symbol": symbol},
            )
            failed.append(symbol)
    snapshot = SentimentSnapshot.from_records(records_by_symbol, config=cfg, jitter=jitter)
    return snapshot, failed


def _mark(degraded: list[str], symbol: str) -> None:
    if symbol not in degraded:
        degraded.append(symbol)
