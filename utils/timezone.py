"""UTC-everywhere time handling. Eliminates timezone bugs at the source."""

from datetime import date, datetime, time, timezone

from pydantic import AwareDatetime

# Calendar dates (payment_date, credit_note_date) or aware timestamps.
# Date-only strings such as "2024-03-10" resolve to date, never to a naive datetime.
DateLike = AwareDatetime | date


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def as_utc_datetime(value: date | datetime) -> datetime:
    """
    Coerce a calendar date or aware datetime to a UTC datetime.

    Plain dates become midnight UTC so they order against timestamps.
    Raises ValueError if a datetime is naive.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def today_utc() -> date:
    """Current calendar date in UTC."""
    return now_utc().date()
