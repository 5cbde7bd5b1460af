# edumanage/schemas/auth/responses.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from edumanage.schemas.enums import AppRole
from edumanage.schemas.school import SchoolRead


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: str


class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    school_id: Optional[str] = None


class RoleGrantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    role: AppRole
    school_id: Optional[str] = None


class SessionResponse(BaseModel):
    user_id: str
    email: str
    profile: Optional[ProfileRead] = None
    roles: List[RoleGrantRead] = []
    primary_role: Optional[AppRole] = None
    school_id: Optional[str] = None


class SignUpResponse(BaseModel):
    user_id: str
    email: str


class RegistrationResponse(BaseModel):
    message: str
    school: SchoolRead
    user_id: str


class IdentityRead(BaseModel):
    """What the identity store hands back after creating or authenticating a login"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    email_confirmed: bool
    created_at: datetime
