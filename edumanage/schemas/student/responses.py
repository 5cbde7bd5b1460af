# edumanage/schemas/student/responses.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from edumanage.schemas.academics import ClassSummary
from edumanage.schemas.enums import Gender, ParentRelationship, StudentStatus


class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    class_id: Optional[str] = None
    user_id: Optional[str] = None
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    admission_number: Optional[str] = None
    enrollment_date: date
    status: StudentStatus
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    classes: Optional[ClassSummary] = None


class ParentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    full_name: str
    email: str


class StudentParentRead(BaseModel):
    id: str
    student_id: str
    parent_id: str
    relationship: ParentRelationship
    is_primary_contact: bool
    created_at: datetime
    profiles: Optional[ParentSummary] = None


class SchoolParentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str
