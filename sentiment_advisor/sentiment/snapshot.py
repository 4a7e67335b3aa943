"""
Per-request sentiment snapshot.

A ``SentimentSnapshot`` is the one set of aggregates used by every consumer in
a single logical request.  The portfolio metrics and the recommendation
engine both read from the same snapshot, so a symbol can never be reported
with one label/trend in the metrics and another in its recommendation, even
when jitter is enabled.

Two ways to obtain one:
  - ``SentimentSnapshot.from_records()`` aggregates raw records now (each
    symbol exactly once).
  - ``SentimentSnapshot.from_aggregates()`` wraps aggregates a caller already
    computed and displayed; these are used verbatim, never recomputed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import datetime
from types import MappingProxyType
from typing import Optional

from sentiment_advisor.config import SentimentConfig
from sentiment_advisor.models.sentiment import SentimentAggregate, SentimentRecord
from sentiment_advisor.sentiment.aggregator import aggregate_sentiment
from sentiment_advisor.sentiment.perturbation import SentimentJitter
from sentiment_advisor.utils.time_utils import utcnow


class SentimentSnapshot(Mapping[str, SentimentAggregate]):
    """Read-only mapping of symbol → aggregate, fixed at construction.

    Attributes:
        computed_at: When the aggregates were produced (or received).
        source:      ``"computed"`` or ``"supplied"``.
    """

    def __init__(
        self,
        aggregates:  Mapping[str, SentimentAggregate],
        computed_at: Optional[datetime] = None,
        source:      str = "computed",
    ) -> None:
        self._aggregates = MappingProxyType(
            {symbol.strip().upper(): agg for symbol, agg in aggregates.items()}
        )
        self.computed_at = computed_at or utcnow()
        self.source = source

    def __getitem__(self, symbol: str) -> SentimentAggregate:
        return self._aggregates[symbol.strip().upper()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._aggregates)

    def __len__(self) -> int:
        return len(self._aggregates)

    def __repr__(self) -> str:
        return (
            f"SentimentSnapshot(symbols={list(self._aggregates)}, "
            f"source={self.source!r}, computed_at={self.computed_at.isoformat()})"
        )

    def get_or_default(self, symbol: str) -> SentimentAggregate:
        """Aggregate for ``symbol``, or the neutral default if not covered."""
        agg = self.get(symbol)
        return agg if agg is not None else SentimentAggregate.neutral_default(symbol)

    @classmethod
    def from_records(
        cls,
        records_by_symbol: Mapping[str, Sequence[SentimentRecord]],
        config:            Optional[SentimentConfig] = None,
        jitter:            Optional[SentimentJitter] = None,
    ) -> "SentimentSnapshot":
        """Aggregate every symbol's records exactly once."""
        return cls(
            {
                symbol: aggregate_sentiment(symbol, records, config=config, jitter=jitter)
                for symbol, records in records_by_symbol.items()
            },
            source="computed",
        )

    @classmethod
    def from_aggregates(
        cls,
        aggregates: Mapping[str, SentimentAggregate] | Iterable[SentimentAggregate],
    ) -> "SentimentSnapshot":
        """Wrap caller-supplied aggregates without recomputing anything."""
        if isinstance(aggregates, Mapping):
            mapping = dict(aggregates)
        else:
            mapping = {agg.symbol: agg for agg in aggregates}
        return cls(mapping, source="supplied")
