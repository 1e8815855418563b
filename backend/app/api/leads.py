"""Lead management endpoints."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from backend.app.core.date_ranges import DateRangePreset, DateRangeVariant, resolve_date_range
from backend.app.core.errors import NotFound
from backend.app.core.identity import Identity, IdentityProvider
from backend.app.core.settings import get_settings
from backend.app.core.stages import display_for
from backend.app.core.time import get_local_zone, utc_now
from backend.app.dependencies.auth import get_current_superadmin, get_current_user, get_identity_provider
from backend.app.dependencies.store import get_lead_store
from backend.app.schemas.lead import Lead, LeadAssign, LeadCreate, LeadRead, LeadUpdate
from backend.app.services.access_policy import can_see, can_view_assignee, scoped_filters, visible_leads
from backend.app.services.lead_analytics import is_overdue
from backend.app.services.lead_export import get_export_bytes
from backend.app.services.lead_query import LeadFilters, SortConfig, query_leads
from backend.app.services.lead_store import LeadStore

router = APIRouter(prefix="/leads", tags=["leads"])


def get_visible_lead(store: LeadStore, lead_id: str, user: Identity) -> Lead:
    lead = store.get(lead_id)
    if not can_see(lead, user):
        raise NotFound()
    return lead


def lead_to_read(lead: Lead, now: datetime, include_history: bool = False) -> LeadRead:
    display = display_for(lead.stage)
    return LeadRead(
        id=lead.id,
        student_name=lead.student_name,
        phone_number=lead.phone_number,
        date=lead.date,
        course_selected=lead.course_selected,
        stage=lead.stage,
        stage_label=display.label,
        stage_badge=display.badge,
        origin=lead.origin,
        assigned_to=lead.assigned_to,
        last_updated=lead.last_updated,
        remarks=lead.remarks,
        is_overdue=is_overdue(lead, now, get_settings().overdue_threshold_days),
        history=list(lead.history) if include_history else [],
    )


def _query_visible(
    store: LeadStore,
    user: Identity,
    *,
    search: str,
    stage: str,
    origin: str,
    course: str,
    assigned_to: str,
    sort_by: str,
    sort_order: str,
    date_range: DateRangePreset | None,
    start_date: date | None,
    end_date: date | None,
    variant: DateRangeVariant,
) -> list[Lead]:
    sort_order_normalized = sort_order.lower()
    if sort_order_normalized not in {"asc", "desc"}:
        raise HTTPException(status_code=400, detail="Invalid sort_order value")

    filters = scoped_filters(
        LeadFilters(search=search, stage=stage, origin=origin, course=course, assigned_to=assigned_to),
        user,
    )
    window = None
    if date_range is not None:
        window = resolve_date_range(
            date_range,
            now=utc_now(),
            tz=get_local_zone(),
            variant=variant,
            start_date=start_date,
            end_date=end_date,
        )
    sort = SortConfig(key=sort_by, direction=sort_order_normalized)
    return query_leads(visible_leads(store.all(), user), filters, sort, window)


@router.post("/", response_model=LeadRead)
async def create_lead(
    lead_in: LeadCreate,
    store: LeadStore = Depends(get_lead_store),
    provider: IdentityProvider = Depends(get_identity_provider),
    current_user: Identity = Depends(get_current_user),
):
    data = lead_in.model_dump(exclude_unset=True)
    if not can_view_assignee(current_user):
        # Counselors own the leads they enter
        data["assigned_to"] = current_user.username
    elif data.get("assigned_to") and provider.lookup(data["assigned_to"]) is None:
        raise HTTPException(status_code=400, detail="Unknown counselor")
    lead = store.create(data)
    return lead_to_read(lead, utc_now(), include_history=True)


@router.get("/", response_model=list[LeadRead])
async def list_leads(
    search: str = "",
    stage: str = "",
    origin: str = "",
    course: str = "",
    assigned_to: str = "",
    sort_by: str = "date",
    sort_order: str = "desc",
    date_range: DateRangePreset | None = Query(default=None, alias="range"),
    start_date: date | None = None,
    end_date: date | None = None,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    leads = _query_visible(
        store,
        current_user,
        search=search,
        stage=stage,
        origin=origin,
        course=course,
        assigned_to=assigned_to,
        sort_by=sort_by,
        sort_order=sort_order,
        date_range=date_range,
        start_date=start_date,
        end_date=end_date,
        variant=DateRangeVariant.DASHBOARD,
    )
    now = utc_now()
    return [lead_to_read(lead, now) for lead in leads]


@router.get("/export", response_class=Response)
async def export_leads(
    search: str = "",
    stage: str = "",
    origin: str = "",
    course: str = "",
    assigned_to: str = "",
    sort_by: str = "date",
    sort_order: str = "desc",
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    leads = _query_visible(
        store,
        current_user,
        search=search,
        stage=stage,
        origin=origin,
        course=course,
        assigned_to=assigned_to,
        sort_by=sort_by,
        sort_order=sort_order,
        date_range=None,
        start_date=None,
        end_date=None,
        variant=DateRangeVariant.DASHBOARD,
    )
    tz = get_local_zone()
    content = get_export_bytes(leads, tz)
    filename = f"leads-{utc_now().astimezone(tz):%Y-%m-%d}.csv"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=content, media_type="text/csv", headers=headers)


@router.post("/assign")
async def assign_leads(
    assignment: LeadAssign,
    store: LeadStore = Depends(get_lead_store),
    provider: IdentityProvider = Depends(get_identity_provider),
    current_user: Identity = Depends(get_current_superadmin),
):
    if not assignment.lead_ids:
        raise HTTPException(status_code=400, detail="Please select leads to assign")
    if provider.lookup(assignment.assigned_to) is None:
        raise HTTPException(status_code=400, detail="Unknown counselor")
    assigned = store.assign(assignment.assigned_to, assignment.lead_ids)
    return {"assigned": assigned, "assigned_to": assignment.assigned_to}


@router.get("/{lead_id}", response_model=LeadRead)
async def get_lead(
    lead_id: str,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    lead = get_visible_lead(store, lead_id, current_user)
    return lead_to_read(lead, utc_now(), include_history=True)


@router.put("/{lead_id}", response_model=LeadRead)
async def update_lead(
    lead_id: str,
    lead_in: LeadUpdate,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    get_visible_lead(store, lead_id, current_user)
    # Only update provided fields
    changes = {field: value for field, value in lead_in.model_dump(exclude_unset=True).items() if value is not None}
    lead = store.update(lead_id, changes)
    return lead_to_read(lead, utc_now(), include_history=True)


@router.delete("/{lead_id}")
async def delete_lead(
    lead_id: str,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    get_visible_lead(store, lead_id, current_user)
    store.remove(lead_id)
    return {"status": "deleted", "id": lead_id}
