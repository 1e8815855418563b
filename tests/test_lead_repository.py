from datetime import UTC, datetime, timedelta

import pytest

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.schemas.lead import Lead
from backend.app.services.lead_repository import SqlLeadRepository
from backend.app.services.lead_store import LeadStore
from backend.app.services.stage_machine import add_remark, transition

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def make_lead(lead_id: str, **overrides) -> Lead:
    data = {
        "id": lead_id,
        "student_name": f"Student {lead_id}",
        "phone_number": "9876543210",
        "date": NOW - timedelta(days=1),
        "course_selected": "DevOps",
        "stage": "Interested",
        "origin": "DGM",
        "assigned_to": "admin1",
        "last_updated": NOW - timedelta(hours=2),
    }
    data.update(overrides)
    return Lead.model_validate(data)


def test_saved_collection_loads_back_unchanged():
    lead = make_lead("b")
    lead = add_remark(lead, "called twice", "admin1", now=NOW)
    lead = transition(lead, "Demo", "booked for Monday", "admin1", now=NOW + timedelta(minutes=1))
    leads = [lead, make_lead("a", assigned_to=None, last_updated=None, stage="Interested Walk-in")]

    repository = SqlLeadRepository(SessionLocal)
    repository.save(leads)
    loaded = repository.load()

    assert loaded == leads
    assert loaded[0].history[1].from_stage == "Interested"
    assert loaded[0].date.tzinfo is not None


def test_save_replaces_previous_collection():
    repository = SqlLeadRepository(SessionLocal)
    repository.save([make_lead("1"), make_lead("2")])
    repository.save([make_lead("2")])
    assert [lead.id for lead in repository.load()] == ["2"]


def test_store_mutations_persist_across_reload():
    repository = SqlLeadRepository(SessionLocal)
    store = LeadStore.load(repository)
    created = store.create(
        {"student_name": "Asha", "phone_number": "9876543210", "course_selected": "DevOps", "origin": "DGM"},
        now=NOW,
    )
    store.assign("admin2", [created.id])

    reloaded = LeadStore.load(repository)
    assert len(reloaded) == 1
    assert reloaded.get(created.id).assigned_to == "admin2"
    assert reloaded.get(created.id).last_updated == NOW


def test_unrecognised_stored_stage_loads_with_warning(caplog):
    repository = SqlLeadRepository(SessionLocal)
    repository.save([make_lead("1", stage="Interested Walk-in"), make_lead("2", stage="Enrolled")])

    with caplog.at_level("WARNING", logger="leaddesk.repository"):
        loaded = repository.load()

    assert [lead.stage for lead in loaded] == ["Interested Walk-in", "Enrolled"]
    warnings = [r.getMessage() for r in caplog.records if r.levelname == "WARNING"]
    assert warnings == ["Lead 2 has unrecognised stage 'Enrolled'"]
