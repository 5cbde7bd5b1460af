# edumanage/schemas/auth/requests.py
from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1)


class SchoolRegistrationRequest(BaseModel):
    """
    Two-step registration form: the school first, then its admin account.
    Password rules are checked by the registration service.
    """
    school_name: str = Field(..., min_length=1)
    school_email: EmailStr
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str
    confirm_password: str
