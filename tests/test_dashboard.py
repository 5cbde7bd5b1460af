# tests/test_dashboard.py
from datetime import date

import pytest

from edumanage.models import AttendanceRecord, Class, Student, UserRole
from edumanage.schemas.enums import AppRole, AttendanceStatus, StudentStatus
from edumanage.services.dashboard_service import DashboardService, dashboard_variant


@pytest.mark.parametrize("role,scope,first_items", [
    (AppRole.SUPER_ADMIN, "Platform Management", ["Dashboard", "Schools", "All Users"]),
    (AppRole.SCHOOL_ADMIN, "School Management", ["Dashboard", "Staff", "Students"]),
    (AppRole.TEACHER, "Teaching Tools", ["Dashboard", "My Classes", "Students"]),
    (AppRole.PARENT, "Parent Portal", ["Dashboard", "My Children", "Progress"]),
    (AppRole.STUDENT, "Student Portal", ["Dashboard", "My Courses", "Assignments"]),
])
def test_variant_per_role(role, scope, first_items):
    variant = dashboard_variant(role)
    assert variant.role is role
    assert variant.scope == scope
    assert [item.title for item in variant.navigation[:3]] == first_items
    assert variant.navigation[-1].title == "Settings"


def test_every_role_has_a_variant():
    for role in AppRole:
        assert dashboard_variant(role).navigation


async def test_admin_dashboard_with_stats(client, session_factory, admin, teacher, school):
    _, headers = admin
    today = date.today()
    async with session_factory() as session:
        grade = Class(school_id=school.id, name="Grade 4", grade_level="4", academic_year="2024-2025")
        retired = Class(school_id=school.id, name="Grade 9", grade_level="9", academic_year="2019-2020",
                        is_active=False)
        session.add_all([grade, retired])
        await session.flush()
        students = [
            Student(school_id=school.id, class_id=grade.id, first_name="Bart", last_name="Simpson"),
            Student(school_id=school.id, class_id=grade.id, first_name="Lisa", last_name="Simpson"),
            Student(school_id=school.id, first_name="Otto", last_name="Mann", status=StudentStatus.GRADUATED),
        ]
        session.add_all(students)
        await session.flush()
        for student, status in zip(students, [AttendanceStatus.PRESENT, AttendanceStatus.ABSENT,
                                              AttendanceStatus.LATE]):
            session.add(AttendanceRecord(school_id=school.id, student_id=student.id, class_id=grade.id,
                                         date=today, status=status))
        await session.commit()

    response = await client.get("/api/v1/dashboard", headers=headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload["variant"]["scope"] == "School Management"
    assert payload["school_id"] == school.id
    assert payload["stats"] == {
        "total_students": 2,
        "teachers": 1,
        "classes": 1,
        "attendance_rate_today": 66.7,
    }


async def test_no_attendance_today_has_no_rate(db, school):
    stats = await DashboardService(db).school_stats(school.id, date(2024, 9, 2))
    assert stats.attendance_rate_today is None
    assert stats.total_students == 0


async def test_only_teacher_grants_are_counted(db, session_factory, teacher, school):
    teacher_id, _ = teacher
    async with session_factory() as session:
        session.add(UserRole(user_id=teacher_id, role=AppRole.PARENT, school_id=school.id))
        await session.commit()

    stats = await DashboardService(db).school_stats(school.id, date.today())
    assert stats.teachers == 1


async def test_parent_gets_parent_portal(client, parent):
    _, headers = parent
    payload = (await client.get("/api/v1/dashboard", headers=headers)).json()
    assert payload["variant"]["role"] == "parent"
    assert payload["variant"]["scope"] == "Parent Portal"


async def test_account_without_roles_falls_back_to_student_portal(client, make_user, headers_for):
    loner = await make_user("loner@springfield.edu")
    payload = (await client.get("/api/v1/dashboard", headers=headers_for(loner))).json()

    assert payload["variant"]["role"] == "student"
    assert payload["school_id"] is None
    assert payload["stats"] is None


async def test_super_admin_sees_no_school_stats(client, make_user, headers_for):
    operator = await make_user("ops@edumanage.io", roles=[AppRole.SUPER_ADMIN])
    payload = (await client.get("/api/v1/dashboard", headers=headers_for(operator))).json()

    assert payload["variant"]["scope"] == "Platform Management"
    assert payload["stats"] is None
