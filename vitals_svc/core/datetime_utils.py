"""
UTC-first datetime utilities for the Vitals Service API.

- All datetimes are stored and processed in UTC
- Stored timestamps are ISO 8601 with millisecond precision and a 'Z' suffix,
  so that string order and time order agree
- Reading keys embed the creation instant as epoch milliseconds

Usage:
    from core.datetime_utils import utc_now, format_iso, epoch_millis

    now = utc_now()
    key_time = epoch_millis(now)      # 1736935800123
    stamp = format_iso(now)           # "2025-01-15T10:10:00.123Z"
"""
import calendar
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 with milliseconds and 'Z' suffix.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.000Z'
    """
    utc_dt = to_utc(dt)
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_dt.microsecond // 1000:03d}Z"


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop sub-millisecond precision, matching what format_iso stores."""
    return dt.replace(microsecond=dt.microsecond // 1000 * 1000)


def epoch_millis(dt: datetime) -> int:
    """Milliseconds since the Unix epoch for a datetime (naive means UTC)."""
    utc_dt = to_utc(dt)
    return calendar.timegm(utc_dt.utctimetuple()) * 1000 + utc_dt.microsecond // 1000


# =============================================================================
# CALENDAR ARITHMETIC
# =============================================================================

def subtract_months(dt: datetime, months: int) -> datetime:
    """
    Move a datetime back by whole calendar months.

    The day of month is clamped to the last day of the target month, so
    31 May minus 3 months is 28/29 February.
    """
    month_index = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def subtract_days(dt: datetime, days: int) -> datetime:
    return dt - timedelta(days=days)


def day_label(dt: datetime) -> str:
    """UTC calendar day of a datetime as 'YYYY-MM-DD' (sorts chronologically)."""
    return to_utc(dt).date().isoformat()
