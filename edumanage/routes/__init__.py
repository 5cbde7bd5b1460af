from .attendance import router as attendance_router
from .auth import router as auth_router
from .classes import router as classes_router
from .dashboard import router as dashboard_router
from .students import router as students_router
from .subjects import router as subjects_router
from .timetable import router as timetable_router
from .users import router as users_router

__all__ = [
    "attendance_router",
    "auth_router",
    "classes_router",
    "dashboard_router",
    "students_router",
    "subjects_router",
    "timetable_router",
    "users_router"
]
