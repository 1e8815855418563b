"""Time utilities for timezone-aware datetimes and local day boundaries."""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from backend.app.core.settings import get_settings


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def get_local_zone(name: str | None = None) -> ZoneInfo:
    return ZoneInfo(name or get_settings().timezone)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def local_date(value: datetime, tz: ZoneInfo) -> date:
    return ensure_utc(value).astimezone(tz).date()


def start_of_day(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(UTC)


def end_of_day(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz).astimezone(UTC)


def local_midnight(now: datetime, tz: ZoneInfo) -> datetime:
    return start_of_day(local_date(now, tz), tz)


def days_ago(now: datetime, days: int) -> datetime:
    return ensure_utc(now) - timedelta(days=days)


def format_human_date(value: datetime | None, tz: ZoneInfo) -> str:
    """Long-form date such as ``October 18th, 2026``."""
    if value is None:
        return ""
    day = local_date(value, tz)
    if 11 <= day.day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day.day % 10, "th")
    return f"{day:%B} {day.day}{suffix}, {day.year}"
