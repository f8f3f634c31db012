"""Datetime helpers."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def in_range(
    dt: datetime | None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> bool:
    """Whether ``dt`` falls inside the optional closed range."""
    dt = ensure_utc_aware(dt)
    if dt is None:
        return date_from is None and date_to is None
    if date_from is not None and dt < ensure_utc_aware(date_from):
        return False
    return not (date_to is not None and dt > ensure_utc_aware(date_to))
