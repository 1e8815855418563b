from datetime import UTC, datetime, timedelta

import pydantic
import pytest

from backend.app.core.errors import NotFound, ValidationError
from backend.app.schemas.lead import Lead
from backend.app.services.lead_store import LeadStore
from backend.app.services.stage_machine import add_remark, transition

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)

PAYLOAD = {
    "student_name": "Asha Rao",
    "phone_number": "9876543210",
    "course_selected": "Data Science",
    "origin": "Website Lead",
}


class RecordingRepository:
    def __init__(self, leads=None):
        self.leads = list(leads or [])
        self.saves = []

    def load(self):
        return list(self.leads)

    def save(self, leads):
        self.saves.append(list(leads))


class FailingRepository(RecordingRepository):
    def save(self, leads):
        raise RuntimeError("disk full")


def make_lead(**overrides) -> Lead:
    data = {
        "id": "a1",
        "student_name": "Asha Rao",
        "phone_number": "9876543210",
        "date": NOW - timedelta(days=3),
        "course_selected": "Data Science",
        "stage": "Interested",
        "origin": "Website Lead",
        "assigned_to": "admin1",
        "last_updated": NOW - timedelta(days=1),
    }
    data.update(overrides)
    return Lead.model_validate(data)


def test_create_assigns_id_and_defaults():
    repo = RecordingRepository()
    store = LeadStore(repo)
    lead = store.create(PAYLOAD, now=NOW)

    assert isinstance(lead.id, str) and lead.id
    assert lead.stage == "RNR"
    assert lead.history == ()
    assert lead.last_updated == NOW
    assert lead.date == NOW
    assert lead.assigned_to is None
    assert repo.saves == [[lead]]


def test_create_ids_are_unique():
    store = LeadStore(RecordingRepository())
    first = store.create(PAYLOAD)
    second = store.create(PAYLOAD)
    assert first.id != second.id
    assert len(store) == 2


def test_create_keeps_explicit_stage_and_date():
    store = LeadStore(RecordingRepository())
    inquiry = NOW - timedelta(days=2)
    lead = store.create({**PAYLOAD, "stage": "Demo", "date": inquiry, "assigned_to": "admin2"}, now=NOW)
    assert lead.stage == "Demo"
    assert lead.date == inquiry
    assert lead.assigned_to == "admin2"


@pytest.mark.parametrize("field", ["student_name", "phone_number", "course_selected", "origin"])
def test_create_requires_fields(field):
    repo = RecordingRepository()
    store = LeadStore(repo)
    blank = {**PAYLOAD, field: "   "}
    missing = {k: v for k, v in PAYLOAD.items() if k != field}

    with pytest.raises(ValidationError):
        store.create(blank)
    with pytest.raises(ValidationError):
        store.create(missing)
    assert len(store) == 0
    assert repo.saves == []


def test_create_rejects_non_digit_phone():
    store = LeadStore(RecordingRepository())
    with pytest.raises(ValidationError):
        store.create({**PAYLOAD, "phone_number": "98-76"})


@pytest.mark.parametrize("phone", ["\u0669\u0668\u0667\u0666", "98765\u0663", "98 76"])
def test_create_rejects_non_ascii_or_spaced_digits(phone):
    store = LeadStore(RecordingRepository())
    with pytest.raises(ValidationError):
        store.create({**PAYLOAD, "phone_number": phone})
    assert len(store) == 0


def test_create_rejects_non_canonical_stage():
    store = LeadStore(RecordingRepository())
    with pytest.raises(ValidationError):
        store.create({**PAYLOAD, "stage": "Interested Walk-in"})


def test_update_merges_patch():
    repo = RecordingRepository()
    store = LeadStore(repo)
    lead = store.create(PAYLOAD, now=NOW)

    updated = store.update(lead.id, {"course_selected": "DevOps"})
    assert updated.course_selected == "DevOps"
    assert updated.student_name == lead.student_name
    assert updated.last_updated == lead.last_updated
    assert store.get(lead.id) == updated
    assert len(repo.saves) == 2


def test_update_unknown_id_raises_not_found():
    store = LeadStore(RecordingRepository())
    with pytest.raises(NotFound):
        store.update("missing", {"origin": "DGM"})


def test_update_cannot_change_id():
    store = LeadStore(RecordingRepository(), [make_lead()])
    with pytest.raises(ValidationError):
        store.update("a1", {"id": "b2"})


def test_update_rejects_unknown_fields():
    store = LeadStore(RecordingRepository(), [make_lead()])
    with pytest.raises(ValidationError):
        store.update("a1", {"priority": "hot"})


def test_update_accepts_stage_machine_result():
    store = LeadStore(RecordingRepository(), [make_lead()])
    changed = transition(store.get("a1"), "Demo", "demo booked", "admin1", now=NOW)

    saved = store.update(
        "a1", {"stage": changed.stage, "history": changed.history, "last_updated": changed.last_updated}
    )
    assert saved.stage == "Demo"
    assert saved.history == changed.history


def test_update_stage_without_history_is_rejected():
    store = LeadStore(RecordingRepository(), [make_lead()])
    with pytest.raises(ValidationError):
        store.update("a1", {"stage": "Demo"})
    assert store.get("a1").stage == "Interested"


def test_update_history_is_append_only():
    lead = add_remark(make_lead(), "first call", "admin1", now=NOW)
    store = LeadStore(RecordingRepository(), [lead])
    with pytest.raises(ValidationError):
        store.update("a1", {"history": ()})


def test_update_last_updated_cannot_move_backwards():
    store = LeadStore(RecordingRepository(), [make_lead()])
    with pytest.raises(ValidationError):
        store.update("a1", {"last_updated": NOW - timedelta(days=10)})


def test_remove_is_idempotent():
    repo = RecordingRepository()
    store = LeadStore(repo, [make_lead()])
    store.remove("a1")
    store.remove("a1")

    with pytest.raises(NotFound):
        store.get("a1")
    assert repo.saves == [[]]


def test_assign_skips_unknown_ids():
    store = LeadStore(RecordingRepository(), [make_lead(), make_lead(id="b2", assigned_to=None)])
    changed = store.assign("admin2", ["a1", "nope", "b2"])

    assert changed == 2
    assert {lead.assigned_to for lead in store.all()} == {"admin2"}


def test_assign_does_not_touch_history_or_timestamp():
    lead = make_lead()
    store = LeadStore(RecordingRepository(), [lead])
    store.assign("admin2", ["a1"])
    assert store.get("a1").history == lead.history
    assert store.get("a1").last_updated == lead.last_updated


def test_failed_save_leaves_state_untouched():
    lead = make_lead()
    store = LeadStore(FailingRepository(), [lead])
    with pytest.raises(RuntimeError):
        store.assign("admin2", ["a1"])
    with pytest.raises(RuntimeError):
        store.remove("a1")
    assert store.get("a1") == lead


def test_leads_handed_out_are_frozen():
    store = LeadStore(RecordingRepository(), [make_lead()])
    lead = store.get("a1")
    with pytest.raises(pydantic.ValidationError):
        lead.stage = "Admission"
    assert store.get("a1").stage == "Interested"


def test_load_keeps_repository_order():
    leads = [make_lead(id=str(i)) for i in range(5)]
    store = LeadStore.load(RecordingRepository(leads))
    assert [lead.id for lead in store.all()] == ["0", "1", "2", "3", "4"]
