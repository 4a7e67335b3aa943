"""UTC helpers shared by models, reports and the pipeline."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_z(value: datetime) -> str:
    """ISO-8601 string with a ``Z`` suffix and millisecond precision.

    Matches the ``timestamp`` format existing report consumers parse, e.g.
    ``"2026-10-19T15:00:00.000Z"``.
    """
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def file_stamp(value: datetime) -> str:
    """Compact UTC stamp for filenames, e.g. ``"20261019T150000Z"``."""
    return ensure_utc(value).strftime("%Y%m%dT%H%M%SZ")
