from .requests import CreateUserRequest, DeleteUserRequest, ListUsersRequest
from .responses import CreateUserResponse, ListUsersResponse, SchoolUser, SchoolUserProfile

__all__ = [
    "CreateUserRequest",
    "DeleteUserRequest",
    "ListUsersRequest",
    "CreateUserResponse",
    "ListUsersResponse",
    "SchoolUser",
    "SchoolUserProfile",
]
