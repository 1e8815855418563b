from datetime import UTC, datetime

from backend.app.core.identity import Identity, Role
from backend.app.schemas.lead import Lead
from backend.app.services.access_policy import (
    can_assign,
    can_see,
    can_view_assignee,
    scoped_filters,
    visible_leads,
)
from backend.app.services.lead_query import LeadFilters

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)

ADMIN1 = Identity(username="admin1", role=Role.ADMIN)
ADMIN2 = Identity(username="admin2", role=Role.ADMIN)
SUPERADMIN = Identity(username="superadmin@123", role=Role.SUPERADMIN)


def make_lead(lead_id: str, assigned_to) -> Lead:
    return Lead(
        id=lead_id,
        student_name=f"Student {lead_id}",
        phone_number="9876543210",
        date=NOW,
        course_selected="DevOps",
        stage="RNR",
        origin="DGM",
        assigned_to=assigned_to,
        last_updated=NOW,
    )


LEADS = [make_lead("1", "admin1"), make_lead("2", "admin2"), make_lead("3", None), make_lead("4", "admin1")]


def test_admin_sees_only_assigned_leads():
    assert [lead.id for lead in visible_leads(LEADS, ADMIN1)] == ["1", "4"]
    assert [lead.id for lead in visible_leads(LEADS, ADMIN2)] == ["2"]


def test_superadmin_sees_everything():
    assert [lead.id for lead in visible_leads(LEADS, SUPERADMIN)] == ["1", "2", "3", "4"]


def test_unassigned_lead_only_visible_to_superadmin():
    unassigned = LEADS[2]
    assert not can_see(unassigned, ADMIN1)
    assert can_see(unassigned, SUPERADMIN)


def test_visibility_matches_can_see():
    for user in (ADMIN1, ADMIN2, SUPERADMIN):
        assert visible_leads(LEADS, user) == [lead for lead in LEADS if can_see(lead, user)]


def test_capabilities_by_role():
    assert not can_assign(ADMIN1)
    assert not can_view_assignee(ADMIN1)
    assert can_assign(SUPERADMIN)
    assert can_view_assignee(SUPERADMIN)


def test_admin_assignee_filter_is_dropped():
    filters = LeadFilters(stage="RNR", assigned_to="admin2")
    assert scoped_filters(filters, ADMIN1) == LeadFilters(stage="RNR")
    assert scoped_filters(filters, SUPERADMIN) == filters
