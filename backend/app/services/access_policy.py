"""Role-based visibility rules. Pure predicates, no mutation."""

from typing import Iterable

from backend.app.core.identity import Identity, Role
from backend.app.schemas.lead import Lead
from backend.app.services.lead_query import LeadFilters


def visible_leads(leads: Iterable[Lead], user: Identity) -> list[Lead]:
    if user.role == Role.SUPERADMIN:
        return list(leads)
    return [lead for lead in leads if lead.assigned_to == user.username]


def can_see(lead: Lead, user: Identity) -> bool:
    return user.role == Role.SUPERADMIN or lead.assigned_to == user.username


def can_assign(user: Identity) -> bool:
    return user.role == Role.SUPERADMIN


def can_view_assignee(user: Identity) -> bool:
    return user.role == Role.SUPERADMIN


def scoped_filters(filters: LeadFilters, user: Identity) -> LeadFilters:
    """Drop the assignee filter for users who cannot see assignments."""
    if can_view_assignee(user) or not filters.assigned_to:
        return filters
    return filters.model_copy(update={"assigned_to": ""})
