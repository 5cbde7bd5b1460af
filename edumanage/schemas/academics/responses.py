# edumanage/schemas/academics/responses.py
from datetime import datetime, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ClassRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    name: str
    grade_level: str
    section: Optional[str] = None
    academic_year: str
    is_active: bool
    created_at: datetime


class ClassSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    grade_level: str


class SubjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    name: str
    code: str
    description: Optional[str] = None
    color: str
    is_active: bool
    created_at: datetime


class SubjectSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    code: str
    color: str


class TeacherSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    full_name: str


class TimetableEntryRead(BaseModel):
    id: str
    school_id: str
    class_id: str
    subject_id: str
    teacher_id: Optional[str] = None
    day_of_week: int
    start_time: time
    end_time: time
    room: Optional[str] = None
    classes: Optional[ClassSummary] = None
    subjects: Optional[SubjectSummary] = None
    profiles: Optional[TeacherSummary] = None


class TimetableDay(BaseModel):
    day_of_week: int
    entries: List[TimetableEntryRead]
