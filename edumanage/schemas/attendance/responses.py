# edumanage/schemas/attendance/responses.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from edumanage.schemas.enums import AttendanceStatus


class AttendanceStudent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    first_name: str
    last_name: str
    admission_number: Optional[str] = None


class AttendanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    student_id: str
    class_id: str
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    marked_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    students: Optional[AttendanceStudent] = None


class AttendanceSummary(BaseModel):
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    total: int = 0


class StudentAttendanceStats(BaseModel):
    student_id: str
    present: int
    total: int
    percentage: int


class WeeklyAttendanceReport(BaseModel):
    class_id: str
    week_start: date
    week_end: date
    records: List[AttendanceRead]
    stats: List[StudentAttendanceStats]
