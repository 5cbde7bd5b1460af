# edumanage/schemas/__init__.py
from .enums import (
    PROVISIONABLE_ROLES,
    ROLE_PRIORITY,
    AppRole,
    AttendanceStatus,
    Gender,
    ParentRelationship,
    ProvisioningAction,
    SchoolAction,
    StudentStatus,
)

__all__ = [
    "PROVISIONABLE_ROLES",
    "ROLE_PRIORITY",
    "AppRole",
    "AttendanceStatus",
    "Gender",
    "ParentRelationship",
    "ProvisioningAction",
    "SchoolAction",
    "StudentStatus",
]
