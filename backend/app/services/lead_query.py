"""Search, filtering, sorting and date windowing over a lead collection."""

from datetime import datetime
from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict

from backend.app.core.date_ranges import DateRange
from backend.app.core.errors import ValidationError
from backend.app.schemas.lead import Lead

SortDirection = Literal["asc", "desc"]

SORTABLE_FIELDS = (
    "student_name",
    "phone_number",
    "date",
    "course_selected",
    "stage",
    "origin",
    "assigned_to",
    "last_updated",
)
TIMESTAMP_FIELDS = frozenset({"date", "last_updated"})


class LeadFilters(BaseModel):
    """Active table filters; an empty string means no constraint."""

    search: str = ""
    stage: str = ""
    origin: str = ""
    course: str = ""
    assigned_to: str = ""

    model_config = ConfigDict(frozen=True)


class SortConfig(BaseModel):
    key: str = "date"
    direction: SortDirection = "desc"

    model_config = ConfigDict(frozen=True)

    def toggle(self, key: str) -> "SortConfig":
        """Clicking the active ascending column flips it; anything else sorts ascending."""
        direction = "desc" if self.key == key and self.direction == "asc" else "asc"
        return SortConfig(key=key, direction=direction)


def matches_search(lead: Lead, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return (
        needle in lead.student_name.lower()
        or search in lead.phone_number
        or needle in lead.course_selected.lower()
    )


def matches_filters(lead: Lead, filters: LeadFilters) -> bool:
    return (
        matches_search(lead, filters.search)
        and (not filters.stage or lead.stage == filters.stage)
        and (not filters.origin or lead.origin == filters.origin)
        and (not filters.course or lead.course_selected == filters.course)
        and (not filters.assigned_to or lead.assigned_to == filters.assigned_to)
    )


def filter_leads(leads: Iterable[Lead], filters: LeadFilters) -> list[Lead]:
    return [lead for lead in leads if matches_filters(lead, filters)]


def within_range(leads: Iterable[Lead], date_range: DateRange) -> list[Lead]:
    """Leads whose inquiry date falls inside the closed interval."""
    return [lead for lead in leads if date_range.contains(lead.date)]


def _sort_value(lead: Lead, key: str) -> tuple[bool, Any]:
    value = getattr(lead, key)
    # None sorts before any value so the comparison never mixes types
    if value is None:
        return (False, datetime.min if key in TIMESTAMP_FIELDS else "")
    return (True, value)


def sort_leads(leads: Iterable[Lead], sort: SortConfig) -> list[Lead]:
    """Stable sort; equal keys keep their input order in both directions."""
    if sort.key not in SORTABLE_FIELDS:
        raise ValidationError(f"Invalid sort_by value: {sort.key}")
    return sorted(leads, key=lambda lead: _sort_value(lead, sort.key), reverse=sort.direction == "desc")


def query_leads(
    leads: Iterable[Lead],
    filters: LeadFilters,
    sort: SortConfig,
    date_range: DateRange | None = None,
) -> list[Lead]:
    result = filter_leads(leads, filters)
    if date_range is not None:
        result = within_range(result, date_range)
    return sort_leads(result, sort)
