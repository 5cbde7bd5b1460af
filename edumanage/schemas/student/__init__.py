from .requests import StudentCreate, StudentParentLink, StudentUpdate
from .responses import ParentSummary, SchoolParentRead, StudentParentRead, StudentRead

__all__ = [
    "StudentCreate",
    "StudentParentLink",
    "StudentUpdate",
    "ParentSummary",
    "SchoolParentRead",
    "StudentParentRead",
    "StudentRead",
]
