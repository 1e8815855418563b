"""Lead store dependency: one store per application, loaded on first use."""

from fastapi import Request

from backend.app.core.dev_seed import ensure_sample_leads
from backend.app.core.settings import get_settings
from backend.app.db.session import SessionLocal
from backend.app.services.lead_repository import SqlLeadRepository
from backend.app.services.lead_store import LeadStore


def build_lead_store() -> LeadStore:
    settings = get_settings()
    repository = SqlLeadRepository(SessionLocal)
    store = LeadStore.load(repository)
    if settings.seed_sample_leads:
        store = ensure_sample_leads(store, repository, settings.sample_lead_count)
    return store


def get_lead_store(request: Request) -> LeadStore:
    store = getattr(request.app.state, "lead_store", None)
    if store is None:
        store = build_lead_store()
        request.app.state.lead_store = store
    return store
