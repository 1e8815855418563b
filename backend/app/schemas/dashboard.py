"""Dashboard schemas for lead overviews."""

from typing import List

from pydantic import BaseModel, ConfigDict

from backend.app.schemas.report import CategoryCount, DateWindow


class DashboardCards(BaseModel):
    total_leads: int
    conversion_rate: str
    overdue_leads: int
    fresh_leads: int

    model_config = ConfigDict(from_attributes=True)


class DashboardSummary(BaseModel):
    as_of: str
    range: DateWindow
    cards: DashboardCards
    stages: List[CategoryCount]
    origins: List[CategoryCount]

    model_config = ConfigDict(from_attributes=True)
