from .requests import LoginRequest, SchoolRegistrationRequest, SignUpRequest
from .responses import (
    IdentityRead,
    ProfileRead,
    RegistrationResponse,
    RoleGrantRead,
    SessionResponse,
    SignUpResponse,
    TokenResponse,
)

__all__ = [
    "LoginRequest",
    "SchoolRegistrationRequest",
    "SignUpRequest",
    "IdentityRead",
    "ProfileRead",
    "RegistrationResponse",
    "RoleGrantRead",
    "SessionResponse",
    "SignUpResponse",
    "TokenResponse",
]
