# edumanage/schemas/attendance/requests.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from edumanage.schemas.enums import AttendanceStatus


class AttendanceEntry(BaseModel):
    student_id: str
    status: AttendanceStatus
    notes: Optional[str] = None


class MarkAttendanceRequest(BaseModel):
    class_id: str
    date: date
    entries: List[AttendanceEntry] = Field(..., min_length=1)
