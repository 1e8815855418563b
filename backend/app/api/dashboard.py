"""Dashboard overview endpoint."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from backend.app.core.date_ranges import DateRangePreset, DateRangeVariant, resolve_date_range
from backend.app.core.identity import Identity
from backend.app.core.settings import get_settings
from backend.app.core.time import get_local_zone, utc_now
from backend.app.dependencies.auth import get_current_user
from backend.app.dependencies.store import get_lead_store
from backend.app.schemas.dashboard import DashboardSummary
from backend.app.services.access_policy import visible_leads
from backend.app.services.dashboard_service import get_dashboard_summary
from backend.app.services.lead_store import LeadStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=DashboardSummary)
async def get_dashboard(
    date_range: DateRangePreset = Query(default=DateRangePreset.TODAY, alias="range"),
    start_date: date | None = None,
    end_date: date | None = None,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    settings = get_settings()
    now = utc_now()
    tz = get_local_zone()
    window = resolve_date_range(
        date_range,
        now=now,
        tz=tz,
        variant=DateRangeVariant.DASHBOARD,
        start_date=start_date,
        end_date=end_date,
    )
    return get_dashboard_summary(
        visible_leads(store.all(), current_user),
        all_leads=list(store.all()),
        date_range=window,
        now=now,
        tz=tz,
        overdue_days=settings.overdue_threshold_days,
        fresh_days=settings.fresh_threshold_days,
    )
