"""Pure aggregations over a lead collection for dashboards and reports."""

from collections import Counter
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence
from zoneinfo import ZoneInfo

from backend.app.core.stages import CANONICAL_STAGES, DEMO_STAGES, Stage
from backend.app.core.time import ensure_utc, local_date
from backend.app.schemas.lead import Lead

ONE_DECIMAL = Decimal("0.1")


def _percentage(numerator: int, denominator: int) -> Decimal:
    if denominator == 0:
        return Decimal("0.0")
    value = Decimal(numerator) * Decimal(100) / Decimal(denominator)
    return value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def count_by_field(leads: Iterable[Lead], field: str) -> Dict[str, int]:
    counts: Counter = Counter()
    for lead in leads:
        counts[getattr(lead, field)] += 1
    return dict(counts)


def stage_funnel(leads: Iterable[Lead]) -> List[dict]:
    """Counts for every canonical stage in funnel order, then any other stored values."""
    counts = count_by_field(leads, "stage")
    rows = [{"stage": stage.value, "count": counts.pop(stage.value, 0)} for stage in CANONICAL_STAGES]
    rows.extend({"stage": name, "count": count} for name, count in sorted(counts.items()))
    return rows


def daily_trend(leads: Iterable[Lead], tz: ZoneInfo) -> List[dict]:
    buckets: Counter = Counter(local_date(lead.date, tz) for lead in leads)
    return [
        {"day": day, "label": f"{day:%b %d}", "count": count}
        for day, count in sorted(buckets.items())
    ]


def admissions_count(leads: Iterable[Lead]) -> int:
    return sum(1 for lead in leads if lead.stage == Stage.ADMISSION.value)


def demo_count(leads: Iterable[Lead]) -> int:
    return sum(1 for lead in leads if lead.stage in DEMO_STAGES)


def conversion_rate(leads: Sequence[Lead]) -> Decimal:
    return _percentage(admissions_count(leads), len(leads))


def demo_conversion_rate(leads: Sequence[Lead]) -> Decimal:
    return _percentage(admissions_count(leads), demo_count(leads))


def is_overdue(lead: Lead, now: datetime, threshold_days: int = 5) -> bool:
    if lead.last_updated is None:
        return False
    return lead.last_updated < ensure_utc(now) - timedelta(days=threshold_days)


def overdue_count(all_leads: Iterable[Lead], now: datetime, threshold_days: int = 5) -> int:
    """Staleness across the whole collection handed in, independent of any date window."""
    return sum(1 for lead in all_leads if is_overdue(lead, now, threshold_days))


def is_fresh(lead: Lead, now: datetime, threshold_days: int = 1) -> bool:
    if lead.last_updated is None:
        return True
    return lead.last_updated > ensure_utc(now) - timedelta(days=threshold_days)


def fresh_count(leads: Iterable[Lead], now: datetime, threshold_days: int = 1) -> int:
    return sum(1 for lead in leads if is_fresh(lead, now, threshold_days))


def breakdown(leads: Iterable[Lead], field: str) -> List[dict]:
    """``count_by_field`` as chart rows, largest first."""
    counts = count_by_field(leads, field)
    return [{"name": name, "value": value} for name, value in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]
