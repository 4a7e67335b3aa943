"""
File-backed ``MarketDataSource`` reading a JSON snapshot envelope.

File structure::

    {
      "_meta": {
        "source": "demo",
        "written_at": "2026-10-19T15:00:00Z"
      },
      "data": {
        "portfolios": {
          "demo": [
            {"symbol": "AAPL", "quantity": 10, "purchasePrice": 175.43}
          ]
        },
        "prices": {"AAPL": 170.00},
        "sentiment": {
          "AAPL": [
            {"timestamp": "2026-10-19T14:00:00Z", "positive": 0.82,
             "negative": 0.08, "neutral": 0.10, "source": "news"}
          ]
        }
      }
    }

The ``_meta`` section is informational only.  The file is read lazily on
first access and cached for the lifetime of the source object.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from sentiment_advisor.ingestion.base import DataSourceError
from sentiment_advisor.models.portfolio import Holding, PriceQuote
from sentiment_advisor.models.sentiment import SentimentRecord

logger = logging.getLogger(__name__)


class SnapshotDataSource:
    """Serves holdings, prices and sentiment records from one snapshot file.

    Attributes:
        path: Location of the snapshot JSON file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: Optional[dict[str, Any]] = None

    # ── Loading ───────────────────────────────────────────────────────────────

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        if not self.path.exists():
            raise DataSourceError(f"Snapshot file not found: {self.path}")
        try:
            envelope = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"Snapshot file is not valid JSON: {self.path}: {exc}") from exc

        data = envelope.get("data") if isinstance(envelope, dict) else None
        if not isinstance(data, dict):
            raise DataSourceError(f"Snapshot file has no 'data' object: {self.path}")

        meta = envelope.get("_meta", {})
        logger.info(
            "Loaded snapshot %s (source=%s, written_at=%s)",
            self.path, meta.get("source", "?"), meta.get("written_at", "?"),
        )
        self._data = data
        return data

    def _section(self, name: str) -> dict[str, Any]:
        section = self._load().get(name, {})
        if not isinstance(section, dict):
            raise DataSourceError(f"Snapshot section '{name}' must be an object.")
        return section

    # ── MarketDataSource ──────────────────────────────────────────────────────

    def portfolio_refs(self) -> list[str]:
        return sorted(self._section("portfolios"))

    def get_holdings(self, portfolio_ref: str) -> list[Holding]:
        portfolios = self._section("portfolios")
        if portfolio_ref not in portfolios:
            raise DataSourceError(
                f"Unknown portfolio '{portfolio_ref}'. "
                f"Available: {sorted(portfolios)}"
            )
        try:
            return [Holding.model_validate(row) for row in portfolios[portfolio_ref]]
        except ValidationError as exc:
            raise DataSourceError(
                f"Invalid holding in portfolio '{portfolio_ref}': {exc}"
            ) from exc

    def get_current_price(self, symbol: str) -> Optional[PriceQuote]:
        symbol = symbol.strip().upper()
        raw = self._section("prices").get(symbol)
        if raw is None:
            return None
        try:
            return PriceQuote(symbol=symbol, price=raw)
        except ValidationError as exc:
            raise DataSourceError(f"Invalid price for {symbol}: {raw!r}") from exc

    def get_recent_sentiment_records(
        self, symbol: str, limit: int = 50
    ) -> list[SentimentRecord]:
        symbol = symbol.strip().upper()
        rows = self._section("sentiment").get(symbol, [])
        try:
            records = [SentimentRecord.model_validate({"symbol": symbol, **row}) for row in rows]
        except (ValidationError, TypeError) as exc:
            raise DataSourceError(f"Invalid sentiment record for {symbol}: {exc}") from exc

        records.sort(key=lambda r: r.timestamp, reverse=True)
        return records[:limit]
