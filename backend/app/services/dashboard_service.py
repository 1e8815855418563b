"""Dashboard cards built from the lead analytics helpers."""

from datetime import datetime
from zoneinfo import ZoneInfo

from backend.app.core.date_ranges import DateRange
from backend.app.schemas.lead import Lead
from backend.app.services.lead_analytics import (
    breakdown,
    conversion_rate,
    fresh_count,
    overdue_count,
)
from backend.app.services.lead_query import within_range


def get_dashboard_summary(
    leads: list[Lead],
    *,
    all_leads: list[Lead] | None = None,
    date_range: DateRange,
    now: datetime,
    tz: ZoneInfo,
    overdue_days: int = 5,
    fresh_days: int = 1,
) -> dict:
    """Summary cards and charts for the dashboard.

    ``leads`` is the caller's visible collection and the window applies to
    every card built from it. Overdue is counted over ``all_leads``, the
    entire store, and defaults to ``leads`` when not given.
    """
    windowed = within_range(leads, date_range)

    # Summary cards
    cards = {
        "total_leads": len(windowed),
        "conversion_rate": str(conversion_rate(windowed)),
        "overdue_leads": overdue_count(leads if all_leads is None else all_leads, now, overdue_days),
        "fresh_leads": fresh_count(windowed, now, fresh_days),
    }

    return {
        "as_of": now.astimezone(tz).isoformat(),
        "range": {"start": date_range.start, "end": date_range.end},
        "cards": cards,
        "stages": breakdown(windowed, "stage"),
        "origins": breakdown(windowed, "origin"),
    }
