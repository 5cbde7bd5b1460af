# edumanage/schemas/user/requests.py
from typing import Optional

from pydantic import BaseModel, Field

# Role stays a plain string here: an out-of-range role is rejected by the
# provisioning service after the authorization gate, not by the parser.


class CreateUserRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    school_id: str = Field(..., min_length=1)


class ListUsersRequest(BaseModel):
    school_id: str = Field(..., min_length=1)
    role: Optional[str] = None


class DeleteUserRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    school_id: str = Field(..., min_length=1)
