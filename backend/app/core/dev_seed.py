import logging
import os
import random
from datetime import datetime, timedelta
from functools import lru_cache

from backend.app.core.identity import Credential, Role
from backend.app.core.security import get_password_hash
from backend.app.core.time import utc_now
from backend.app.schemas.lead import Lead
from backend.app.services.lead_store import LeadStore

logger = logging.getLogger("leaddesk.seed")

DEFAULT_DEV_USERS = [
    ("admin1", "admin@123", Role.ADMIN),
    ("admin2", "admin2@123", Role.ADMIN),
    ("superadmin@123", "super@123", Role.SUPERADMIN),
]

SAMPLE_COURSES = ["Full Stack Development", "Data Science", "Cloud Computing", "DevOps", "Cybersecurity"]
SAMPLE_STAGES = [
    "RNR",
    "Interested",
    "Not Interested",
    "Walk-in",
    "Interested Walk-in",
    "Demo",
    "Demo Completed",
    "Admission",
]
SAMPLE_ORIGINS = ["DGM", "Website Lead", "Facebook Lead", "Direct Call"]


@lru_cache(maxsize=1)
def default_credentials() -> tuple[Credential, ...]:
    """Credential list for local development, hashed once per process."""
    return tuple(
        Credential(username=username, password_hash=get_password_hash(password), role=role)
        for username, password, role in DEFAULT_DEV_USERS
    )


def generate_sample_leads(count: int, now: datetime | None = None, rng: random.Random | None = None) -> list[dict]:
    """Dummy inquiries spread over the last 30 days.

    Stages include the legacy ``Interested Walk-in`` value, so rows are
    written straight to the repository rather than through ``LeadStore.create``.
    """
    now = now or utc_now()
    rng = rng or random.Random()
    return [
        {
            "id": str(i + 1),
            "student_name": f"Student {i + 1}",
            "phone_number": f"98765{43210 + i:05d}",
            "date": now - timedelta(days=rng.randrange(30)),
            "course_selected": rng.choice(SAMPLE_COURSES),
            "stage": rng.choice(SAMPLE_STAGES),
            "origin": rng.choice(SAMPLE_ORIGINS),
            "assigned_to": "admin1" if rng.random() > 0.5 else "admin2",
            "history": (),
            "last_updated": now,
            "remarks": "",
        }
        for i in range(count)
    ]


def ensure_sample_leads(store: LeadStore, repository, count: int) -> LeadStore:
    """
    Seed an empty development store with dummy leads.
    Skips execution when running under pytest to avoid altering test expectations.
    """
    if os.getenv("PYTEST_CURRENT_TEST") or len(store):
        return store

    leads = [Lead.model_validate(data) for data in generate_sample_leads(count)]
    repository.save(leads)
    logger.info("Seeded %d sample leads", len(leads))
    return LeadStore(repository, leads)
