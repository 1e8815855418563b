"""Named and custom date-range selections for dashboards and reports.

Dashboard and report screens resolve the same presets with different
alignment:

* ``dashboard``: N-day presets start at local midnight N days before today and
  end at ``now``.
* ``report``: N-day presets start exactly N days before ``now`` and end at the
  end of the local day.

``today``, ``yesterday`` and ``custom`` resolve identically for both.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from zoneinfo import ZoneInfo

from backend.app.core.errors import ValidationError
from backend.app.core.time import days_ago, end_of_day, ensure_utc, local_date, local_midnight, start_of_day


class DateRangePreset(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "7days"
    LAST_15_DAYS = "15days"
    LAST_30_DAYS = "30days"
    LAST_MONTH = "1month"
    LAST_90_DAYS = "90days"
    CUSTOM = "custom"


class DateRangeVariant(str, Enum):
    DASHBOARD = "dashboard"
    REPORT = "report"


PRESET_DAYS: dict[DateRangePreset, int] = {
    DateRangePreset.LAST_7_DAYS: 7,
    DateRangePreset.LAST_15_DAYS: 15,
    DateRangePreset.LAST_30_DAYS: 30,
    DateRangePreset.LAST_MONTH: 30,
    DateRangePreset.LAST_90_DAYS: 90,
}

DEFAULT_PRESET: dict[DateRangeVariant, DateRangePreset] = {
    DateRangeVariant.DASHBOARD: DateRangePreset.TODAY,
    DateRangeVariant.REPORT: DateRangePreset.LAST_7_DAYS,
}


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, value: datetime) -> bool:
        return self.start <= ensure_utc(value) <= self.end


def resolve_date_range(
    preset: DateRangePreset | str,
    *,
    now: datetime,
    tz: ZoneInfo,
    variant: DateRangeVariant = DateRangeVariant.DASHBOARD,
    start_date: date | None = None,
    end_date: date | None = None,
) -> DateRange:
    try:
        preset = DateRangePreset(preset)
    except ValueError as exc:
        raise ValidationError(f"Unknown date range: {preset}") from exc
    now = ensure_utc(now)

    if preset == DateRangePreset.CUSTOM:
        if start_date is None or end_date is None:
            return resolve_date_range(DEFAULT_PRESET[variant], now=now, tz=tz, variant=variant)
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        return DateRange(start_of_day(start_date, tz), end_of_day(end_date, tz))

    midnight = local_midnight(now, tz)
    if preset == DateRangePreset.TODAY:
        return DateRange(midnight, now)
    if preset == DateRangePreset.YESTERDAY:
        yesterday = local_date(now, tz) - timedelta(days=1)
        return DateRange(start_of_day(yesterday, tz), midnight)

    days = PRESET_DAYS[preset]
    if variant == DateRangeVariant.REPORT:
        return DateRange(days_ago(now, days), end_of_day(local_date(now, tz), tz))
    start = start_of_day(local_date(now, tz) - timedelta(days=days), tz)
    return DateRange(start, now)
