"""Export leads as flat rows and CSV text."""

import csv
import io
from typing import Iterable, List
from zoneinfo import ZoneInfo

from backend.app.core.time import format_human_date
from backend.app.schemas.lead import Lead

EXPORT_COLUMNS = [
    "Student Name",
    "Phone Number",
    "Date",
    "Course",
    "Stage",
    "Origin",
    "Assigned To",
    "Last Updated",
]


def build_export_rows(leads: Iterable[Lead], tz: ZoneInfo) -> List[dict]:
    rows = []
    for lead in leads:
        rows.append(
            {
                "Student Name": lead.student_name,
                "Phone Number": lead.phone_number,
                "Date": format_human_date(lead.date, tz),
                "Course": lead.course_selected,
                "Stage": lead.stage,
                "Origin": lead.origin,
                "Assigned To": lead.assigned_to or "",
                "Last Updated": format_human_date(lead.last_updated, tz),
            }
        )
    return rows


def build_export_csv(rows: List[dict]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def get_export_bytes(leads: Iterable[Lead], tz: ZoneInfo) -> bytes:
    return build_export_csv(build_export_rows(leads, tz)).encode("utf-8")
