from .base import Base, TenantModel
from .school import School
from .identity import AuthIdentity, RevokedToken
from .profile import Profile, UserRole
from .class_ import Class
from .subject import Subject
from .timetable import TimetableEntry
from .student import Student, StudentParent
from .attendance import AttendanceRecord

__all__ = [
    'Base',
    'TenantModel',
    'School',
    'AuthIdentity',
    'RevokedToken',
    'Profile',
    'UserRole',
    'Class',
    'Subject',
    'TimetableEntry',
    'Student',
    'StudentParent',
    'AttendanceRecord'
]
