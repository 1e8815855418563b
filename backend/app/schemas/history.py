"""History entry schemas: the append-only audit trail of a lead."""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.core.time import ensure_utc


class HistoryEntryBase(BaseModel):
    content: str
    timestamp: datetime
    user: str

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class RemarkEntry(HistoryEntryBase):
    type: Literal["remark"] = "remark"


class StageChangeEntry(HistoryEntryBase):
    type: Literal["stage"] = "stage"
    from_stage: str
    to_stage: str


HistoryEntry = Annotated[Union[RemarkEntry, StageChangeEntry], Field(discriminator="type")]


class RemarkCreate(BaseModel):
    """Payload for appending a remark."""

    content: str


class StageChangeCreate(BaseModel):
    """Payload for moving a lead to another stage."""

    to_stage: str
    content: str
