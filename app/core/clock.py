"""
Calendar helpers.

Completions are stored as UTC instants; a "day" is the local date in
HABITS_TIMEZONE. Every day boundary used in a query is converted back to UTC.
"""
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from app.core.config import HABITS_TIMEZONE

LOCAL_TZ = ZoneInfo(HABITS_TIMEZONE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive values; they were written as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_date(dt: datetime) -> date:
    return as_utc(dt).astimezone(LOCAL_TZ).date()


def local_today(now: datetime | None = None) -> date:
    return local_date(now or utcnow())


def day_start_utc(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=LOCAL_TZ).astimezone(timezone.utc)


def day_bounds_utc(day: date) -> tuple[datetime, datetime]:
    """[start, end) of a local day, in UTC."""
    return day_start_utc(day), day_start_utc(day + timedelta(days=1))


def trailing_days(today: date, count: int = 7) -> list[date]:
    """`count` days ending at `today`, oldest first."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]
