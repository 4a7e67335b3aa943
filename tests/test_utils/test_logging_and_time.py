"""Tests for sentiment_advisor.utils (JSON log formatter and UTC helpers)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone

from sentiment_advisor.utils.logging import JsonFormatter
from sentiment_advisor.utils.time_utils import ensure_utc, file_stamp, isoformat_z


def _record(msg: str, *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("sentiment_advisor.test", logging.WARNING, __file__, 1, msg, args, None)
    for key, val in extra.items():
        setattr(record, key, val)
    return record


def test_json_formatter_core_fields() -> None:
    """Each line is a JSON object with ts/level/logger/msg."""
    line = JsonFormatter().format(_record("Price lookup failed for %s", "TSLA"))
    payload = json.loads(line)
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "sentiment_advisor.test"
    assert payload["msg"] == "Price lookup failed for TSLA"
    assert payload["ts"].endswith("Z")


def test_json_formatter_includes_extra() -> None:
    """Fields passed via extra= appear at the top level."""
    payload = json.loads(JsonFormatter().format(_record("degraded", symbol="TSLA")))
    assert payload["symbol"] == "TSLA"
    assert "args" not in payload


def test_isoformat_z_milliseconds() -> None:
    """Timestamps render with millisecond precision and a Z suffix."""
    ts = datetime(2026, 10, 19, 15, 0, 0, 987654, tzinfo=timezone.utc)
    assert isoformat_z(ts) == "2026-10-19T15:00:00.987Z"


def test_ensure_utc() -> None:
    """Naive values gain UTC; aware values are converted."""
    naive = datetime(2026, 10, 19, 15, 0, 0)
    assert ensure_utc(naive).tzinfo is timezone.utc
    aware = datetime(2026, 10, 19, 17, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(aware) == datetime(2026, 10, 19, 15, 0, 0, tzinfo=timezone.utc)


def test_file_stamp() -> None:
    assert file_stamp(datetime(2026, 10, 19, 15, 0, 0)) == "20261019T150000Z"
