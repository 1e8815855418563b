"""Lead conversion report for a date window."""

from datetime import datetime
from zoneinfo import ZoneInfo

from backend.app.core.date_ranges import DateRange
from backend.app.core.stages import Stage
from backend.app.schemas.lead import Lead
from backend.app.services.lead_analytics import (
    admissions_count,
    breakdown,
    conversion_rate,
    daily_trend,
    demo_conversion_rate,
    demo_count,
    stage_funnel,
)
from backend.app.services.lead_query import within_range


def get_lead_report(leads: list[Lead], *, date_range: DateRange, now: datetime, tz: ZoneInfo) -> dict:
    windowed = within_range(leads, date_range)
    metrics = {
        "total_leads": len(windowed),
        "admissions": admissions_count(windowed),
        "demos": demo_count(windowed),
        "interested": sum(1 for lead in windowed if lead.stage == Stage.INTERESTED.value),
        "conversion_rate": str(conversion_rate(windowed)),
        "demo_conversion_rate": str(demo_conversion_rate(windowed)),
    }
    return {
        "as_of": now.astimezone(tz).isoformat(),
        "range": {"start": date_range.start, "end": date_range.end},
        "metrics": metrics,
        "funnel": stage_funnel(windowed),
        "daily_leads": daily_trend(windowed, tz),
        "sources": breakdown(windowed, "origin"),
    }
