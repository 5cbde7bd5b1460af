# edumanage/services/dashboard_service.py
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, select

from edumanage.core.session import SessionContext
from edumanage.models import AttendanceRecord, Class, Student, UserRole
from edumanage.schemas.dashboard import DashboardResponse, DashboardVariant, NavItem, SchoolStats
from edumanage.schemas.enums import AppRole, AttendanceStatus, StudentStatus
from .base_service import BaseService

NavSpec = Tuple[str, str, str]

HOME: NavSpec = ("Dashboard", "/dashboard", "layout-dashboard")
SETTINGS: NavSpec = ("Settings", "/dashboard/settings", "settings")
MESSAGES: NavSpec = ("Messages", "/dashboard/messages", "message-square")


def _menu(*items: NavSpec) -> List[NavItem]:
    return [NavItem(title=title, url=url, icon=icon) for title, url, icon in items]


def dashboard_variant(role: AppRole) -> DashboardVariant:
    """Navigation and scope label for the role's dashboard"""
    match role:
        case AppRole.SUPER_ADMIN:
            return DashboardVariant(role=role, scope="Platform Management", navigation=_menu(
                HOME,
                ("Schools", "/dashboard/schools", "building-2"),
                ("All Users", "/dashboard/users", "users"),
                ("Analytics", "/dashboard/analytics", "bar-chart-3"),
                SETTINGS,
            ))
        case AppRole.SCHOOL_ADMIN:
            return DashboardVariant(role=role, scope="School Management", navigation=_menu(
                HOME,
                ("Staff", "/dashboard/staff", "user-cog"),
                ("Students", "/dashboard/students", "graduation-cap"),
                ("Parents", "/dashboard/parents", "users"),
                ("Classes", "/dashboard/classes", "book-open"),
                ("Subjects", "/dashboard/subjects", "file-text"),
                ("Timetable", "/dashboard/timetable", "calendar"),
                ("Reports", "/dashboard/reports", "bar-chart-3"),
                ("Fees", "/dashboard/fees", "credit-card"),
                SETTINGS,
            ))
        case AppRole.TEACHER:
            return DashboardVariant(role=role, scope="Teaching Tools", navigation=_menu(
                HOME,
                ("My Classes", "/dashboard/classes", "book-open"),
                ("Students", "/dashboard/students", "graduation-cap"),
                ("Assignments", "/dashboard/assignments", "file-text"),
                ("Attendance", "/dashboard/attendance", "calendar"),
                MESSAGES,
                SETTINGS,
            ))
        case AppRole.PARENT:
            return DashboardVariant(role=role, scope="Parent Portal", navigation=_menu(
                HOME,
                ("My Children", "/dashboard/children", "users"),
                ("Progress", "/dashboard/progress", "bar-chart-3"),
                ("Attendance", "/dashboard/attendance", "calendar"),
                MESSAGES,
                ("Fees", "/dashboard/fees", "credit-card"),
                SETTINGS,
            ))
        case AppRole.STUDENT:
            return DashboardVariant(role=role, scope="Student Portal", navigation=_menu(
                HOME,
                ("My Courses", "/dashboard/courses", "book-open"),
                ("Assignments", "/dashboard/assignments", "file-text"),
                ("Grades", "/dashboard/grades", "bar-chart-3"),
                ("Schedule", "/dashboard/schedule", "calendar"),
                MESSAGES,
                SETTINGS,
            ))
        case _:
            raise ValueError(f"Unhandled role: {role}")


class DashboardService(BaseService):

    async def build(self, context: SessionContext, today: Optional[date] = None) -> DashboardResponse:
        # Accounts without any grant land on the least privileged dashboard
        role = context.primary_role() or AppRole.STUDENT
        school_id = context.school_id

        stats = None
        if school_id and role is not AppRole.SUPER_ADMIN:
            stats = await self.school_stats(school_id, today or date.today())

        return DashboardResponse(variant=dashboard_variant(role), school_id=school_id, stats=stats)

    async def school_stats(self, school_id: str, today: date) -> SchoolStats:
        total_students = await self.db.scalar(
            select(func.count()).select_from(Student).where(
                Student.school_id == school_id,
                Student.status == StudentStatus.ACTIVE
            )
        )
        teachers = await self.db.scalar(
            select(func.count(func.distinct(UserRole.user_id))).where(
                UserRole.school_id == school_id,
                UserRole.role == AppRole.TEACHER
            )
        )
        classes = await self.db.scalar(
            select(func.count()).select_from(Class).where(
                Class.school_id == school_id,
                Class.is_active.is_(True)
            )
        )

        result = await self.db.execute(
            select(AttendanceRecord.status, func.count())
            .where(AttendanceRecord.school_id == school_id, AttendanceRecord.date == today)
            .group_by(AttendanceRecord.status)
        )
        counts = {status: count for status, count in result.all()}
        marked = sum(counts.values())
        attended = counts.get(AttendanceStatus.PRESENT, 0) + counts.get(AttendanceStatus.LATE, 0)

        return SchoolStats(
            total_students=total_students or 0,
            teachers=teachers or 0,
            classes=classes or 0,
            attendance_rate_today=round(attended / marked * 100, 1) if marked else None
        )
