from .requests import (
    ClassCreate,
    ClassUpdate,
    SubjectCreate,
    SubjectUpdate,
    TimetableEntryCreate,
    TimetableEntryUpdate,
)
from .responses import (
    ClassRead,
    ClassSummary,
    SubjectRead,
    SubjectSummary,
    TeacherSummary,
    TimetableDay,
    TimetableEntryRead,
)

__all__ = [
    "ClassCreate",
    "ClassUpdate",
    "SubjectCreate",
    "SubjectUpdate",
    "TimetableEntryCreate",
    "TimetableEntryUpdate",
    "ClassRead",
    "ClassSummary",
    "SubjectRead",
    "SubjectSummary",
    "TeacherSummary",
    "TimetableDay",
    "TimetableEntryRead",
]
