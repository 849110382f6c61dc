"""Datetime utilities for provider metadata timestamps."""
from datetime import datetime, timezone


def ensure_aware(dt: datetime | None) -> datetime | None:
    """
    Convert naive datetime to aware UTC datetime.

    Bucket metadata timestamps are UTC but may arrive without an offset.

    Args:
        dt: A datetime object, which may be naive or aware.

    Returns:
        A timezone-aware datetime in UTC, or None if input is None.

    Examples:
        >>> from datetime import datetime, timezone
        >>> naive_dt = datetime(2025, 1, 1, 12, 0)
        >>> aware_dt = ensure_aware(naive_dt)
        >>> aware_dt.tzinfo
        datetime.timezone.utc
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as returned by the storage API.

    Returns None for missing or unparseable values.
    """
    if value is None or isinstance(value, datetime):
        return ensure_aware(value)
    try:
        # fromisoformat only accepts a trailing "Z" from 3.11 on
        return ensure_aware(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
