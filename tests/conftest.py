"""
Shared pytest fixtures for the Sentiment Advisor test suite.

Provides:
  - ``make_records``: factory for newest-first ``SentimentRecord`` lists.
  - Sample holdings / prices / aggregates for the AAPL and TSLA scenarios.
  - ``snapshot_file``: a small snapshot JSON written to ``tmp_path``.
  - ``app_config``: an ``AppConfig`` pointing all file I/O at ``tmp_path``.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

from sentiment_advisor.config import AppConfig, DataConfig, LoggingConfig
from sentiment_advisor.models.portfolio import Holding, PriceQuote
from sentiment_advisor.models.sentiment import SentimentAggregate, SentimentRecord
from sentiment_advisor.taxonomy.signal_taxonomy import SentimentLabel, SentimentTrend

BASE_TIME = datetime(2026, 10, 19, 15, 0, 0, tzinfo=timezone.utc)


# ── Sentiment records ─────────────────────────────────────────────────────────

@pytest.fixture
def make_records() -> Callable[..., list[SentimentRecord]]:
    """Return a factory building one record per positive share, newest first.

    ``negative`` is shared by every record; neutral takes the remainder.
    Record *i* is stamped ``i`` hours before ``BASE_TIME``.
    """

    def _make(
        positives: list[float],
        negative: float = 0.1,
        symbol: str = "AAPL",
        source: str = "news",
    ) -> list[SentimentRecord]:
        return [
            SentimentRecord(
                symbol=symbol,
                timestamp=BASE_TIME - timedelta(hours=i),
                positive=p,
                negative=negative,
                neutral=max(0.0, 1.0 - p - negative),
                source=source,
            )
            for i, p in enumerate(positives)
        ]

    return _make


# ── Portfolio samples ─────────────────────────────────────────────────────────

@pytest.fixture
def aapl_holding() -> Holding:
    return Holding(symbol="AAPL", quantity=10, purchase_price=175.43)


@pytest.fixture
def aapl_aggregate() -> SentimentAggregate:
    """Strongly positive, improving AAPL sentiment (positive 0.82)."""
    return SentimentAggregate(
        symbol="AAPL",
        positive=0.82,
        negative=0.08,
        neutral=0.10,
        label=SentimentLabel.POSITIVE,
        trend=SentimentTrend.IMPROVING,
        sample_size=20,
    )


@pytest.fixture
def tsla_aggregate() -> SentimentAggregate:
    """Strongly negative TSLA sentiment (negative 0.78)."""
    return SentimentAggregate(
        symbol="TSLA",
        positive=0.12,
        negative=0.78,
        neutral=0.10,
        label=SentimentLabel.NEGATIVE,
        trend=SentimentTrend.STABLE,
        sample_size=5,
    )


@pytest.fixture
def sample_holdings() -> list[Holding]:
    return [
        Holding(symbol="AAPL", quantity=10, purchase_price=175.43),
        Holding(symbol="TSLA", quantity=10, purchase_price=200.00),
        Holding(symbol="MSFT", quantity=5, purchase_price=400.00),
    ]


@pytest.fixture
def sample_prices() -> dict[str, PriceQuote]:
    return {
        "AAPL": PriceQuote(symbol="AAPL", price=170.00),
        "TSLA": PriceQuote(symbol="TSLA", price=222.92),
        "MSFT": PriceQuote(symbol="MSFT", price=400.00),
    }


# ── Files and config ──────────────────────────────────────────────────────────

def _snapshot_payload() -> dict:
    aapl_rows = [
        {
            "timestamp": (BASE_TIME - timedelta(hours=i)).isoformat(),
            "positive": 0.85 if i < 10 else 0.60,
            "negative": 0.05 if i < 10 else 0.10,
            "neutral": 0.10 if i < 10 else 0.30,
            "source": "news",
        }
        for i in range(20)
    ]
    tsla_rows = [
        {
            "timestamp": (BASE_TIME - timedelta(hours=i)).isoformat(),
            "positive": 0.12,
            "negative": 0.78,
            "neutral": 0.10,
            "source": "twitter",
        }
        for i in range(5)
    ]
    return {
        "_meta": {"source": "test", "written_at": BASE_TIME.isoformat()},
        "data": {
            "portfolios": {
                "main": [
                    {"symbol": "AAPL", "quantity": 10, "purchasePrice": 175.43},
                    {"symbol": "TSLA", "quantity": 10, "purchasePrice": 200.00},
                    {"symbol": "MSFT", "quantity": 5, "purchasePrice": 400.00},
                ],
                "empty": [],
            },
            "prices": {"AAPL": 170.00, "TSLA": 222.92},
            "sentiment": {"AAPL": aapl_rows, "TSLA": tsla_rows},
        },
    }


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Snapshot with portfolios ``main`` (3 holdings, MSFT unpriced, no MSFT
    sentiment) and ``empty``."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(_snapshot_payload()), encoding="utf-8")
    return path


@pytest.fixture
def app_config(tmp_path: Path, snapshot_file: Path) -> AppConfig:
    return AppConfig(
        data=DataConfig(
            snapshot_path=str(snapshot_file),
            output_dir=str(tmp_path / "outputs"),
        ),
        logging=LoggingConfig(level="DEBUG", log_file=""),
    )
