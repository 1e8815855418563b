"""Lead schemas: the canonical record plus create/update/read payloads."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from backend.app.core.time import ensure_utc
from backend.app.schemas.history import HistoryEntry


class Lead(BaseModel):
    """A prospective-student record as held by the lead store.

    Instances are frozen; every mutation produces a new record through the
    store's contract.
    """

    id: str
    student_name: str
    phone_number: str
    date: datetime
    course_selected: str
    stage: str
    origin: str
    assigned_to: Optional[str] = None
    last_updated: Optional[datetime] = None
    remarks: str = ""
    history: tuple[HistoryEntry, ...] = ()

    model_config = ConfigDict(frozen=True)

    @field_validator("date", "last_updated")
    @classmethod
    def _timestamps_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None


LEAD_FIELDS = frozenset(Lead.model_fields)
REQUIRED_CREATE_FIELDS = ("student_name", "phone_number", "course_selected", "origin")


class LeadCreate(BaseModel):
    """Schema for lead creation requests."""

    student_name: str
    phone_number: str
    course_selected: str
    origin: str
    date: Optional[datetime] = None
    stage: Optional[str] = None
    assigned_to: Optional[str] = None
    remarks: str = ""


class LeadUpdate(BaseModel):
    """Schema for plain field edits; stage and history change through their own endpoints."""

    student_name: Optional[str] = None
    phone_number: Optional[str] = None
    course_selected: Optional[str] = None
    origin: Optional[str] = None
    date: Optional[datetime] = None
    remarks: Optional[str] = None


class LeadAssign(BaseModel):
    assigned_to: str
    lead_ids: list[str]


class LeadRead(BaseModel):
    """Schema for lead responses."""

    id: str
    student_name: str
    phone_number: str
    date: datetime
    course_selected: str
    stage: str
    stage_label: str
    stage_badge: str
    origin: str
    assigned_to: Optional[str] = None
    last_updated: Optional[datetime] = None
    remarks: str = ""
    is_overdue: bool = False
    history: list[HistoryEntry] = []
