# edumanage/schemas/academics/requests.py
from datetime import time
from typing import Optional

from pydantic import BaseModel, Field

from edumanage.schemas.common import PartialUpdate


class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    grade_level: str = Field(..., min_length=1, max_length=50)
    section: Optional[str] = Field(default=None, max_length=50)
    academic_year: Optional[str] = Field(default=None, max_length=20)


class ClassUpdate(PartialUpdate):
    """Partial update; omitted fields are left unchanged"""
    NON_NULLABLE = frozenset({"name", "grade_level", "academic_year", "is_active"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    grade_level: Optional[str] = Field(default=None, min_length=1, max_length=50)
    section: Optional[str] = Field(default=None, max_length=50)
    academic_year: Optional[str] = Field(default=None, max_length=20)
    is_active: Optional[bool] = None


class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")


class SubjectUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"name", "code", "color", "is_active"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    is_active: Optional[bool] = None


class TimetableEntryCreate(BaseModel):
    class_id: str
    subject_id: str
    teacher_id: Optional[str] = None
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    start_time: time
    end_time: time
    room: Optional[str] = Field(default=None, max_length=100)


class TimetableEntryUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"class_id", "subject_id", "day_of_week", "start_time", "end_time"})

    class_id: Optional[str] = None
    subject_id: Optional[str] = None
    teacher_id: Optional[str] = None
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    room: Optional[str] = Field(default=None, max_length=100)
