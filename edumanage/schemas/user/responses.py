# edumanage/schemas/user/responses.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from edumanage.schemas.enums import AppRole


class SchoolUserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str
    avatar_url: Optional[str] = None


class SchoolUser(BaseModel):
    """A role row joined with the display fields of its profile"""
    id: str
    role: AppRole
    user_id: str
    created_at: datetime
    profiles: Optional[SchoolUserProfile] = None


class ListUsersResponse(BaseModel):
    users: List[SchoolUser]


class CreateUserResponse(BaseModel):
    success: bool = True
    user_id: str
