# edumanage/schemas/enums.py
from enum import Enum


class AppRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    PARENT = "parent"
    STUDENT = "student"


# Fixed order used to pick the primary role; earlier wins
ROLE_PRIORITY = (
    AppRole.SUPER_ADMIN,
    AppRole.SCHOOL_ADMIN,
    AppRole.TEACHER,
    AppRole.PARENT,
    AppRole.STUDENT,
)

# Roles a school admin may grant through provisioning
PROVISIONABLE_ROLES = frozenset({AppRole.TEACHER, AppRole.PARENT, AppRole.STUDENT})


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
    TRANSFERRED = "transferred"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ParentRelationship(str, Enum):
    PARENT = "parent"
    GUARDIAN = "guardian"
    OTHER = "other"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class ProvisioningAction(str, Enum):
    CREATE_USER = "create_user"
    LIST_USERS = "list_users"
    DELETE_USER = "delete_user"


class SchoolAction(str, Enum):
    """Actions checked by the authorization gate"""
    CREATE_USER = "create_user"
    LIST_USERS = "list_users"
    DELETE_USER = "delete_user"
    MANAGE_SCHOOL = "manage_school"
    MARK_ATTENDANCE = "mark_attendance"
    VIEW_SCHOOL = "view_school"
