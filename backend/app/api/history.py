"""Lead history endpoints: remarks, stage changes and the audit trail."""

from fastapi import APIRouter, Depends

from backend.app.api.leads import get_visible_lead, lead_to_read
from backend.app.core.identity import Identity
from backend.app.core.time import utc_now
from backend.app.dependencies.auth import get_current_user
from backend.app.dependencies.store import get_lead_store
from backend.app.schemas.history import HistoryEntry, RemarkCreate, StageChangeCreate
from backend.app.schemas.lead import LeadRead
from backend.app.services.lead_store import LeadStore
from backend.app.services.stage_machine import add_remark, transition

router = APIRouter(prefix="/leads", tags=["history"])


@router.get("/{lead_id}/history", response_model=list[HistoryEntry])
async def get_history(
    lead_id: str,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    lead = get_visible_lead(store, lead_id, current_user)
    return list(lead.history)


@router.post("/{lead_id}/remarks", response_model=LeadRead)
async def create_remark(
    lead_id: str,
    remark_in: RemarkCreate,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    lead = get_visible_lead(store, lead_id, current_user)
    updated = add_remark(lead, remark_in.content, current_user.username)
    saved = store.update(lead_id, {"history": updated.history, "last_updated": updated.last_updated})
    return lead_to_read(saved, utc_now(), include_history=True)


@router.post("/{lead_id}/stage", response_model=LeadRead)
async def change_stage(
    lead_id: str,
    stage_in: StageChangeCreate,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    lead = get_visible_lead(store, lead_id, current_user)
    updated = transition(lead, stage_in.to_stage, stage_in.content, current_user.username)
    saved = store.update(
        lead_id,
        {"stage": updated.stage, "history": updated.history, "last_updated": updated.last_updated},
    )
    return lead_to_read(saved, utc_now(), include_history=True)
