from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class DateWindow(BaseModel):
    start: datetime
    end: datetime


class CategoryCount(BaseModel):
    name: str
    value: int


class StageCount(BaseModel):
    stage: str
    count: int


class DailyCount(BaseModel):
    day: date
    label: str
    count: int


class ReportMetrics(BaseModel):
    total_leads: int
    admissions: int
    demos: int
    interested: int
    conversion_rate: str
    demo_conversion_rate: str

    model_config = ConfigDict(from_attributes=True)


class LeadReport(BaseModel):
    as_of: str
    range: DateWindow
    metrics: ReportMetrics
    funnel: list[StageCount]
    daily_leads: list[DailyCount]
    sources: list[CategoryCount]

    model_config = ConfigDict(from_attributes=True)
