"""
clock.py — UTC time helpers shared by models, services, and serialisers.

All timestamps are stored and compared in UTC. SQLite returns naive
datetimes even for DateTime(timezone=True) columns; as_utc() normalises
both shapes before they are serialised.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive values are taken to be UTC already; aware values are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat()
