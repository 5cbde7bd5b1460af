from .auth_service import AuthService
from .registration_service import RegistrationService
from .identity_service import IdentityStore
from .provisioning_service import ProvisioningService
from .class_service import ClassService
from .subject_service import SubjectService
from .timetable_service import TimetableService
from .student_service import StudentService
from .attendance_service import AttendanceService
from .dashboard_service import DashboardService

__all__ = [
    "AuthService",
    "RegistrationService",
    "IdentityStore",
    "ProvisioningService",
    "ClassService",
    "SubjectService",
    "TimetableService",
    "StudentService",
    "AttendanceService",
    "DashboardService"
]
