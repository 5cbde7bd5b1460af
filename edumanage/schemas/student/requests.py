# edumanage/schemas/student/requests.py
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from edumanage.schemas.common import PartialUpdate
from edumanage.schemas.enums import Gender, ParentRelationship, StudentStatus


class StudentCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    class_id: Optional[str] = None
    user_id: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    admission_number: Optional[str] = Field(default=None, max_length=50)
    enrollment_date: Optional[date] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = Field(default=None, max_length=255)
    emergency_contact_phone: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None


class StudentUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"first_name", "last_name", "status"})

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    class_id: Optional[str] = None
    user_id: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    admission_number: Optional[str] = Field(default=None, max_length=50)
    status: Optional[StudentStatus] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = Field(default=None, max_length=255)
    emergency_contact_phone: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None


class StudentParentLink(BaseModel):
    parent_id: str
    relationship: ParentRelationship = ParentRelationship.PARENT
    is_primary_contact: bool = False
