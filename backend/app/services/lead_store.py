"""The lead store: sole owner and mutator of the lead collection."""

import logging
import re
import uuid
from datetime import datetime
from typing import Any, Iterable, Mapping

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from backend.app.core.errors import NotFound, ValidationError
from backend.app.core.stages import INITIAL_STAGE, parse_stage
from backend.app.core.time import ensure_utc, utc_now
from backend.app.schemas.history import StageChangeEntry
from backend.app.schemas.lead import LEAD_FIELDS, REQUIRED_CREATE_FIELDS, Lead
from backend.app.services.lead_repository import LeadRepository

logger = logging.getLogger("leaddesk.store")

PHONE_PATTERN = re.compile(r"[0-9]+")


def _as_dict(data: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


class LeadStore:
    """In-memory lead collection persisted in full after every mutation.

    Leads are kept in insertion order. Records handed out are frozen, so the
    only way to change state is through ``create``, ``update``, ``remove`` and
    ``assign``.
    """

    def __init__(self, repository: LeadRepository, leads: Iterable[Lead] = ()):
        self._repository = repository
        self._leads: dict[str, Lead] = {lead.id: lead for lead in leads}

    @classmethod
    def load(cls, repository: LeadRepository) -> "LeadStore":
        store = cls(repository, repository.load())
        logger.info("Lead store loaded with %d leads", len(store))
        return store

    def __len__(self) -> int:
        return len(self._leads)

    def all(self) -> tuple[Lead, ...]:
        return tuple(self._leads.values())

    def get(self, lead_id: str) -> Lead:
        lead = self._leads.get(lead_id)
        if lead is None:
            raise NotFound()
        return lead

    def _commit(self, leads: dict[str, Lead]) -> None:
        # Save before swapping so a failed write leaves the store unchanged
        self._repository.save(leads.values())
        self._leads = leads

    def create(self, partial: BaseModel | Mapping[str, Any], now: datetime | None = None) -> Lead:
        data = _as_dict(partial)
        unknown = set(data) - LEAD_FIELDS
        if unknown:
            raise ValidationError(f"Unknown lead fields: {', '.join(sorted(unknown))}")
        phone = self._check_required(data)

        stage = data.get("stage") or INITIAL_STAGE.value
        if parse_stage(stage) is None:
            raise ValidationError(f"Unknown stage: {stage!r}")

        now = ensure_utc(now or utc_now())
        data.update(
            id=uuid.uuid4().hex,
            phone_number=phone,
            stage=stage,
            date=data.get("date") or now,
            last_updated=now,
            history=(),
        )
        data.setdefault("remarks", "")
        if data["remarks"] is None:
            data["remarks"] = ""
        lead = self._validated(data)

        self._commit({**self._leads, lead.id: lead})
        logger.info("Created lead %s (%s)", lead.id, lead.origin)
        return lead

    def update(self, lead_id: str, patch: BaseModel | Mapping[str, Any]) -> Lead:
        current = self.get(lead_id)
        changes = _as_dict(patch)
        unknown = set(changes) - LEAD_FIELDS
        if unknown:
            raise ValidationError(f"Unknown lead fields: {', '.join(sorted(unknown))}")
        if "id" in changes and changes["id"] != current.id:
            raise ValidationError("Lead id cannot be changed")

        merged = current.model_dump()
        merged.update(changes)
        merged["phone_number"] = self._check_required(merged)
        lead = self._validated(merged)
        self._check_history(current, lead)

        self._commit({**self._leads, lead_id: lead})
        logger.debug("Updated lead %s: %s", lead_id, ", ".join(sorted(changes)))
        return lead

    def remove(self, lead_id: str) -> None:
        if lead_id not in self._leads:
            return
        self._commit({k: v for k, v in self._leads.items() if k != lead_id})
        logger.info("Removed lead %s", lead_id)

    def assign(self, counselor: str, lead_ids: Iterable[str]) -> int:
        """Assign every known id to ``counselor``; unknown ids are skipped."""
        leads = dict(self._leads)
        changed = 0
        for lead_id in dict.fromkeys(lead_ids):
            lead = leads.get(lead_id)
            if lead is None:
                logger.debug("Skipping assignment of unknown lead %s", lead_id)
                continue
            leads[lead_id] = lead.model_copy(update={"assigned_to": counselor})
            changed += 1
        self._commit(leads)
        logger.info("Assigned %d leads to %s", changed, counselor)
        return changed

    @staticmethod
    def _check_required(data: dict[str, Any]) -> str:
        """Reject blank required fields; returns the normalized phone number."""
        missing = [f for f in REQUIRED_CREATE_FIELDS if not str(data.get(f) or "").strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        phone = str(data["phone_number"]).strip()
        if not PHONE_PATTERN.fullmatch(phone):
            raise ValidationError("Phone number must contain digits only")
        return phone

    @staticmethod
    def _validated(data: dict[str, Any]) -> Lead:
        try:
            return Lead.model_validate(data)
        except SchemaValidationError as exc:
            raise ValidationError(f"Invalid lead: {exc.errors()[0]['msg']}") from exc

    @staticmethod
    def _check_history(current: Lead, updated: Lead) -> None:
        old, new = current.history, updated.history
        if new[: len(old)] != old:
            raise ValidationError("History is append-only")
        if (
            current.last_updated is not None
            and (updated.last_updated is None or updated.last_updated < current.last_updated)
        ):
            raise ValidationError("last_updated cannot move backwards")
        if updated.stage == current.stage:
            return
        if parse_stage(updated.stage) is None:
            raise ValidationError(f"Unknown stage: {updated.stage!r}")
        appended = new[len(old):]
        stage_entries = [e for e in appended if isinstance(e, StageChangeEntry)]
        if (
            len(stage_entries) != 1
            or stage_entries[0].from_stage != current.stage
            or stage_entries[0].to_stage != updated.stage
        ):
            raise ValidationError("A stage change must append exactly one matching stage history entry")
