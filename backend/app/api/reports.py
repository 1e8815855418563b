"""Lead report endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from backend.app.core.date_ranges import DateRangePreset, DateRangeVariant, resolve_date_range
from backend.app.core.identity import Identity
from backend.app.core.time import get_local_zone, utc_now
from backend.app.dependencies.auth import get_current_user
from backend.app.dependencies.store import get_lead_store
from backend.app.schemas.report import LeadReport
from backend.app.services.access_policy import visible_leads
from backend.app.services.lead_export import get_export_bytes
from backend.app.services.lead_query import within_range
from backend.app.services.lead_store import LeadStore
from backend.app.services.report_service import get_lead_report

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/", response_model=LeadReport)
async def lead_report(
    date_range: DateRangePreset = Query(default=DateRangePreset.LAST_7_DAYS, alias="range"),
    start_date: date | None = None,
    end_date: date | None = None,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    now = utc_now()
    tz = get_local_zone()
    window = resolve_date_range(
        date_range, now=now, tz=tz, variant=DateRangeVariant.REPORT, start_date=start_date, end_date=end_date
    )
    return get_lead_report(visible_leads(store.all(), current_user), date_range=window, now=now, tz=tz)


@router.get("/export", response_class=Response)
async def lead_report_export(
    date_range: DateRangePreset = Query(default=DateRangePreset.LAST_7_DAYS, alias="range"),
    start_date: date | None = None,
    end_date: date | None = None,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    now = utc_now()
    tz = get_local_zone()
    window = resolve_date_range(
        date_range, now=now, tz=tz, variant=DateRangeVariant.REPORT, start_date=start_date, end_date=end_date
    )
    leads = within_range(visible_leads(store.all(), current_user), window)
    headers = {
        "Content-Disposition": f'attachment; filename="lead-report-{now.astimezone(tz):%Y-%m-%d}.csv"'
    }
    return Response(content=get_export_bytes(leads, tz), media_type="text/csv", headers=headers)
