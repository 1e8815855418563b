"""Stage transitions and remarks for a single lead.

Any stage may follow any stage; this module only validates input and keeps
the history and ``last_updated`` bookkeeping consistent. The returned lead is
a new record that callers hand to the lead store.
"""

from datetime import datetime, timedelta

from backend.app.core.errors import ValidationError
from backend.app.core.stages import parse_stage
from backend.app.core.time import ensure_utc, utc_now
from backend.app.schemas.history import RemarkEntry, StageChangeEntry
from backend.app.schemas.lead import Lead


def next_timestamp(lead: Lead, now: datetime | None = None) -> datetime:
    """A ``last_updated`` value strictly after the lead's current one."""
    now = ensure_utc(now or utc_now())
    if lead.last_updated is not None and now <= lead.last_updated:
        return lead.last_updated + timedelta(microseconds=1)
    return now


def transition(lead: Lead, to_stage: str, reason: str, actor: str, now: datetime | None = None) -> Lead:
    target = parse_stage(to_stage)
    if target is None:
        raise ValidationError(f"Unknown stage: {to_stage!r}" if to_stage else "Stage is required")
    if not reason or not reason.strip():
        raise ValidationError("Remarks are required for a stage change")

    timestamp = next_timestamp(lead, now)
    entry = StageChangeEntry(
        from_stage=lead.stage,
        to_stage=target.value,
        content=reason,
        timestamp=timestamp,
        user=actor,
    )
    return lead.model_copy(
        update={"stage": target.value, "history": (*lead.history, entry), "last_updated": timestamp}
    )


def add_remark(lead: Lead, text: str, actor: str, now: datetime | None = None) -> Lead:
    if not text or not text.strip():
        raise ValidationError("Remark text is required")

    timestamp = next_timestamp(lead, now)
    entry = RemarkEntry(content=text, timestamp=timestamp, user=actor)
    return lead.model_copy(update={"history": (*lead.history, entry), "last_updated": timestamp})
