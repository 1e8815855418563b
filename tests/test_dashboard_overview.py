from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from backend.app.core.time import utc_now
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.schemas.lead import Lead
from backend.app.services.lead_repository import SqlLeadRepository


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    app.state.lead_store = None
    yield
    app.state.lead_store = None
    Base.metadata.drop_all(bind=engine)


def login(client: TestClient, username: str, password: str) -> dict:
    resp = client.post("/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def seed_leads(*leads: dict):
    now = utc_now()
    rows = []
    for index, overrides in enumerate(leads):
        data = {
            "id": str(index + 1),
            "student_name": f"Student {index + 1}",
            "phone_number": "9876543210",
            "date": now,
            "course_selected": "DevOps",
            "stage": "RNR",
            "origin": "DGM",
            "assigned_to": "admin1",
            "last_updated": now,
        }
        data.update(overrides)
        rows.append(Lead.model_validate(data))
    SqlLeadRepository(SessionLocal).save(rows)


def test_dashboard_defaults_to_today():
    now = utc_now()
    seed_leads(
        {"stage": "Admission"},
        {"origin": "Website Lead"},
        {"date": now - timedelta(days=3), "last_updated": now - timedelta(days=10)},
    )
    client = TestClient(app)
    resp = client.get("/dashboard/", headers=login(client, "superadmin@123", "super@123"))
    assert resp.status_code == 200
    data = resp.json()

    assert data["cards"] == {
        "total_leads": 2,
        "conversion_rate": "50.0",
        "overdue_leads": 1,
        "fresh_leads": 2,
    }
    assert {row["name"]: row["value"] for row in data["origins"]} == {"DGM": 1, "Website Lead": 1}
    assert {row["name"]: row["value"] for row in data["stages"]} == {"Admission": 1, "RNR": 1}


def test_dashboard_range_parameter():
    now = utc_now()
    seed_leads({}, {"date": now - timedelta(days=3)}, {"date": now - timedelta(days=40)})
    client = TestClient(app)
    headers = login(client, "superadmin@123", "super@123")

    week = client.get("/dashboard/", params={"range": "7days"}, headers=headers).json()
    quarter = client.get("/dashboard/", params={"range": "90days"}, headers=headers).json()
    assert week["cards"]["total_leads"] == 2
    assert quarter["cards"]["total_leads"] == 3


def test_dashboard_is_scoped_by_role():
    stale = utc_now() - timedelta(days=8)
    seed_leads(
        {"assigned_to": "admin1"},
        {"assigned_to": "admin2"},
        {"assigned_to": None, "last_updated": stale},
    )
    client = TestClient(app)

    admin = client.get("/dashboard/", headers=login(client, "admin2", "admin2@123")).json()
    superadmin = client.get("/dashboard/", headers=login(client, "superadmin@123", "super@123")).json()
    assert admin["cards"]["total_leads"] == 1
    assert superadmin["cards"]["total_leads"] == 3
    # Overdue is store-wide for every role
    assert admin["cards"]["overdue_leads"] == 1
    assert superadmin["cards"]["overdue_leads"] == 1


def test_admin_overdue_counts_other_counselors_leads():
    now = utc_now()
    seed_leads(
        {"assigned_to": "admin1", "last_updated": now - timedelta(days=2)},
        {"assigned_to": "admin2", "last_updated": now - timedelta(days=6)},
    )
    client = TestClient(app)

    data = client.get("/dashboard/", headers=login(client, "admin1", "admin@123")).json()
    assert data["cards"]["overdue_leads"] == 1
    assert data["cards"]["total_leads"] == 1


def test_dashboard_empty_collection():
    client = TestClient(app)
    data = client.get("/dashboard/", headers=login(client, "admin1", "admin@123")).json()
    assert data["cards"]["total_leads"] == 0
    assert data["cards"]["conversion_rate"] == "0.0"
    assert data["stages"] == []


def test_dashboard_rejects_inverted_custom_range():
    client = TestClient(app)
    resp = client.get(
        "/dashboard/",
        params={"range": "custom", "start_date": "2026-10-10", "end_date": "2026-10-01"},
        headers=login(client, "admin1", "admin@123"),
    )
    assert resp.status_code == 400


def test_dashboard_requires_auth():
    client = TestClient(app)
    assert client.get("/dashboard/").status_code == 401
