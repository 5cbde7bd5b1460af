from .requests import AttendanceEntry, MarkAttendanceRequest
from .responses import (
    AttendanceRead,
    AttendanceStudent,
    AttendanceSummary,
    StudentAttendanceStats,
    WeeklyAttendanceReport,
)

__all__ = [
    "AttendanceEntry",
    "MarkAttendanceRequest",
    "AttendanceRead",
    "AttendanceStudent",
    "AttendanceSummary",
    "StudentAttendanceStats",
    "WeeklyAttendanceReport",
]
