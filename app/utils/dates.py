"""
UTC helpers.

SQLite hands timestamps back without tzinfo while PostgreSQL returns them
aware; everything that compares or formats stored datetimes goes through
as_utc() so both behave the same.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC, convert aware ones to UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_key(value: datetime | None) -> str:
    """YYYY-MM of a datetime in UTC (current month when value is None)"""
    value = as_utc(value) or utcnow()
    return value.strftime("%Y-%m")


def month_bounds(month: str) -> tuple[datetime, datetime]:
    """
    Half-open UTC window [start, end) for a YYYY-MM string

    Example:
        >>> month_bounds("2024-12")
        (datetime(2024, 12, 1, tzinfo=utc), datetime(2025, 1, 1, tzinfo=utc))
    """
    year, mon = (int(part) for part in month.split("-"))
    start = datetime(year, mon, 1, tzinfo=timezone.utc)
    if mon == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, mon + 1, 1, tzinfo=timezone.utc)
    return start, end
