# tests/test_permissions.py
import pytest
from sqlalchemy import delete

from edumanage.core.errors import AuthorizationError
from edumanage.core.permissions import ActionPolicy, AuthorizationGate
from edumanage.models import UserRole
from edumanage.schemas.enums import AppRole, SchoolAction


def test_every_action_has_a_policy_and_message():
    for action in SchoolAction:
        assert ActionPolicy.required_roles(action)
        assert ActionPolicy.DENIAL_MESSAGES[action]


def test_view_school_accepts_every_role():
    assert ActionPolicy.required_roles(SchoolAction.VIEW_SCHOOL) == frozenset(AppRole)


async def test_admin_may_create_users(db, admin, school):
    admin_id, _ = admin
    gate = AuthorizationGate(db)
    assert await gate.is_allowed(admin_id, school.id, SchoolAction.CREATE_USER)
    await gate.authorize(admin_id, school.id, SchoolAction.CREATE_USER)


async def test_teacher_may_list_but_not_create(db, teacher, school):
    teacher_id, _ = teacher
    gate = AuthorizationGate(db)
    assert await gate.is_allowed(teacher_id, school.id, SchoolAction.LIST_USERS)
    assert await gate.is_allowed(teacher_id, school.id, SchoolAction.MARK_ATTENDANCE)
    assert not await gate.is_allowed(teacher_id, school.id, SchoolAction.CREATE_USER)

    with pytest.raises(AuthorizationError) as exc_info:
        await gate.authorize(teacher_id, school.id, SchoolAction.CREATE_USER)
    assert exc_info.value.message == "Only school admins can add users"
    assert exc_info.value.status_code == 403


async def test_role_in_another_school_does_not_count(db, make_school, make_user, school):
    other = await make_school("Shelbyville Elementary")
    outsider = await make_user("admin@shelbyville.edu", other.id, [AppRole.SCHOOL_ADMIN])

    gate = AuthorizationGate(db)
    assert await gate.is_allowed(outsider, other.id, SchoolAction.DELETE_USER)
    assert not await gate.is_allowed(outsider, school.id, SchoolAction.DELETE_USER)
    assert not await gate.is_allowed(outsider, school.id, SchoolAction.VIEW_SCHOOL)


async def test_missing_school_is_rejected(db, admin):
    admin_id, _ = admin
    gate = AuthorizationGate(db)
    assert not await gate.is_allowed(admin_id, None, SchoolAction.VIEW_SCHOOL)
    with pytest.raises(AuthorizationError):
        await gate.authorize(admin_id, None, SchoolAction.VIEW_SCHOOL)


async def test_revoked_role_stops_working_immediately(db, session_factory, admin, school):
    admin_id, _ = admin
    gate = AuthorizationGate(db)
    assert await gate.is_allowed(admin_id, school.id, SchoolAction.MANAGE_SCHOOL)

    async with session_factory() as session:
        await session.execute(delete(UserRole).where(UserRole.user_id == admin_id))
        await session.commit()

    assert not await gate.is_allowed(admin_id, school.id, SchoolAction.MANAGE_SCHOOL)
