"""Persistence boundary for the lead collection.

The store loads the whole collection once and saves the whole collection after
every mutation; ``SqlLeadRepository`` rewrites both tables in a single
transaction so a save is all-or-nothing.
"""

import logging
from typing import Iterable, Protocol

from sqlalchemy.orm import Session, selectinload, sessionmaker

from backend.app.core.stages import is_known_stage
from backend.app.core.time import ensure_utc
from backend.app.models.history import LeadHistoryEntry
from backend.app.models.lead import Lead as LeadModel
from backend.app.schemas.history import RemarkEntry, StageChangeEntry
from backend.app.schemas.lead import Lead

logger = logging.getLogger("leaddesk.repository")


class LeadRepository(Protocol):
    def load(self) -> list[Lead]: ...

    def save(self, leads: Iterable[Lead]) -> None: ...


def _history_to_row(entry, sequence: int) -> LeadHistoryEntry:
    return LeadHistoryEntry(
        sequence=sequence,
        entry_type=entry.type,
        content=entry.content,
        from_stage=getattr(entry, "from_stage", None),
        to_stage=getattr(entry, "to_stage", None),
        user=entry.user,
        timestamp=entry.timestamp,
    )


def _row_to_history(row: LeadHistoryEntry):
    # SQLite drops tzinfo; timestamps are always written as UTC
    timestamp = ensure_utc(row.timestamp)
    if row.entry_type == "stage":
        return StageChangeEntry(
            from_stage=row.from_stage,
            to_stage=row.to_stage,
            content=row.content,
            timestamp=timestamp,
            user=row.user,
        )
    return RemarkEntry(content=row.content, timestamp=timestamp, user=row.user)


def lead_to_row(lead: Lead, position: int) -> LeadModel:
    row = LeadModel(
        id=lead.id,
        position=position,
        student_name=lead.student_name,
        phone_number=lead.phone_number,
        date=lead.date,
        course_selected=lead.course_selected,
        stage=lead.stage,
        origin=lead.origin,
        assigned_to=lead.assigned_to,
        last_updated=lead.last_updated,
        remarks=lead.remarks,
    )
    row.history = [_history_to_row(entry, index) for index, entry in enumerate(lead.history)]
    return row


def row_to_lead(row: LeadModel) -> Lead:
    if not is_known_stage(row.stage):
        # Kept as stored; it renders as-is and counts as its own funnel row
        logger.warning("Lead %s has unrecognised stage %r", row.id, row.stage)
    return Lead(
        id=row.id,
        student_name=row.student_name,
        phone_number=row.phone_number,
        date=ensure_utc(row.date),
        course_selected=row.course_selected,
        stage=row.stage,
        origin=row.origin,
        assigned_to=row.assigned_to,
        last_updated=ensure_utc(row.last_updated) if row.last_updated is not None else None,
        remarks=row.remarks or "",
        history=tuple(_row_to_history(h) for h in row.history),
    )


class SqlLeadRepository:
    """Stores the lead collection in the ``leads`` and ``lead_history`` tables."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def load(self) -> list[Lead]:
        db: Session = self._session_factory()
        try:
            rows = (
                db.query(LeadModel)
                .options(selectinload(LeadModel.history))
                .order_by(LeadModel.position.asc())
                .all()
            )
            leads = [row_to_lead(row) for row in rows]
        finally:
            db.close()
        logger.debug("Loaded %d leads", len(leads))
        return leads

    def save(self, leads: Iterable[Lead]) -> None:
        db: Session = self._session_factory()
        try:
            db.query(LeadHistoryEntry).delete(synchronize_session=False)
            db.query(LeadModel).delete(synchronize_session=False)
            rows = [lead_to_row(lead, position) for position, lead in enumerate(leads)]
            db.add_all(rows)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.debug("Saved %d leads", len(rows))
