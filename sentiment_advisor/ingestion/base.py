"""
Collaborator contract for portfolio, price and sentiment data.

The core never talks to storage or feeds directly; it is handed a
``MarketDataSource``.  Any object with these three methods qualifies
(structural typing), e.g. the file-backed ``SnapshotDataSource`` or a
test double.

Failure contract
----------------
Implementations raise ``DataSourceError`` when a lookup *fails* (I/O,
malformed payload).  A lookup that succeeds but finds nothing returns
``None`` / ``[]``, which the core treats as "use the default".
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from sentiment_advisor.models.portfolio import Holding, PriceQuote
from sentiment_advisor.models.sentiment import SentimentRecord


class DataSourceError(RuntimeError):
    """A collaborator could not fetch the requested data."""


@runtime_checkable
class MarketDataSource(Protocol):

    def get_holdings(self, portfolio_ref: str) -> list[Holding]:
        """Holdings of ``portfolio_ref``; raises ``DataSourceError`` if unknown."""
        ...

    def get_current_price(self, symbol: str) -> Optional[PriceQuote]:
        """Latest quote for ``symbol``, or ``None`` if there is none."""
        ...

    def get_recent_sentiment_records(
        self, symbol: str, limit: int = 50
    ) -> list[SentimentRecord]:
        """Up to ``limit`` scored documents for ``symbol``, newest first."""
        ...
