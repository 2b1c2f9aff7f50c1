"""Timestamp helpers."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Naive UTC timestamp, the form stored in SQLite."""
    return datetime.now(UTC).replace(tzinfo=None)
