# edumanage/schemas/dashboard/responses.py
from typing import List, Optional

from pydantic import BaseModel

from edumanage.schemas.enums import AppRole


class NavItem(BaseModel):
    title: str
    url: str
    icon: str


class DashboardVariant(BaseModel):
    role: AppRole
    scope: str
    navigation: List[NavItem]


class SchoolStats(BaseModel):
    total_students: int
    teachers: int
    classes: int
    attendance_rate_today: Optional[float] = None


class DashboardResponse(BaseModel):
    variant: DashboardVariant
    school_id: Optional[str] = None
    stats: Optional[SchoolStats] = None
