# tests/test_session.py
import asyncio

import pytest

from edumanage.core.session import AuthEvent, SessionContext, SessionSnapshot, SessionUser
from edumanage.schemas.auth import ProfileRead, RoleGrantRead
from edumanage.schemas.enums import AppRole
from edumanage.services.auth_service import load_session_data


def snapshot_for(user_id, school_id="school-1", roles=()):
    return SessionSnapshot(
        profile=ProfileRead(id=user_id, email=f"{user_id}@springfield.edu", full_name=user_id, school_id=school_id),
        roles=[
            RoleGrantRead(id=f"{user_id}-{role.value}", role=role, school_id=school_id)
            for role in roles
        ]
    )


class ControlledLoader:
    """Loader whose responses are released by the test"""

    def __init__(self, snapshots):
        self.snapshots = snapshots
        self.calls = []
        self.gates = {user_id: asyncio.Event() for user_id in snapshots}

    def release(self, user_id):
        self.gates[user_id].set()

    async def __call__(self, user_id):
        self.calls.append(user_id)
        await self.gates[user_id].wait()
        return self.snapshots[user_id]


async def test_refresh_is_deferred_out_of_the_callback():
    loader = ControlledLoader({"u1": snapshot_for("u1", roles=[AppRole.TEACHER])})
    context = SessionContext(loader)

    context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u1", "u1@springfield.edu"))

    # Nothing fetched synchronously; the user is known but roles are not yet
    assert loader.calls == []
    assert context.user.id == "u1"
    assert context.roles == ()
    assert context.is_loading is True

    loader.release("u1")
    await context.wait_until_ready()
    assert context.is_loading is False
    assert loader.calls == ["u1"]
    assert context.has_role(AppRole.TEACHER)
    assert context.school_id == "school-1"


async def test_primary_role_follows_fixed_priority():
    loader = ControlledLoader({"u1": snapshot_for("u1", roles=[AppRole.PARENT, AppRole.TEACHER])})
    loader.release("u1")
    context = SessionContext(loader)
    context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u1", "u1@springfield.edu"))
    await context.wait_until_ready()

    assert context.primary_role() == AppRole.TEACHER


async def test_primary_role_is_none_without_grants():
    loader = ControlledLoader({"u1": snapshot_for("u1", school_id=None)})
    loader.release("u1")
    context = SessionContext(loader)
    context.on_auth_state_change(AuthEvent.INITIAL_SESSION, SessionUser("u1", "u1@springfield.edu"))
    await context.wait_until_ready()

    assert context.primary_role() is None
    assert context.school_id is None


async def test_has_role_can_be_scoped_to_a_school():
    loader = ControlledLoader({"u1": snapshot_for("u1", school_id="school-1", roles=[AppRole.SCHOOL_ADMIN])})
    loader.release("u1")
    context = SessionContext(loader)
    context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u1", "u1@springfield.edu"))
    await context.wait_until_ready()

    assert context.has_role(AppRole.SCHOOL_ADMIN)
    assert context.has_role(AppRole.SCHOOL_ADMIN, "school-1")
    assert not context.has_role(AppRole.SCHOOL_ADMIN, "school-2")
    assert not context.has_role(AppRole.TEACHER)


async def test_sign_out_clears_state_and_drops_pending_refresh():
    loader = ControlledLoader({"u1": snapshot_for("u1", roles=[AppRole.TEACHER])})
    context = SessionContext(loader)
    context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u1", "u1@springfield.edu"))
    await asyncio.sleep(0)

    context.on_auth_state_change(AuthEvent.SIGNED_OUT)
    loader.release("u1")
    await asyncio.sleep(0)
    await context.wait_until_ready()

    assert context.user is None
    assert context.profile is None
    assert context.roles == ()
    assert context.primary_role() is None
    assert context.is_loading is False


async def test_late_refresh_for_previous_user_is_discarded():
    loader = ControlledLoader({
        "u1": snapshot_for("u1", roles=[AppRole.SCHOOL_ADMIN]),
        "u2": snapshot_for("u2", roles=[AppRole.STUDENT]),
    })
    context = SessionContext(loader)

    context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u1", "u1@springfield.edu"))
    await asyncio.sleep(0)
    context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u2", "u2@springfield.edu"))

    loader.release("u2")
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert context.is_loading is False
    loader.release("u1")
    await context.wait_until_ready()
    assert context.is_loading is False

    assert context.user.id == "u2"
    assert context.profile.id == "u2"
    assert context.primary_role() == AppRole.STUDENT


async def test_failed_fetch_surfaces_on_wait():
    async def broken_loader(user_id):
        raise RuntimeError("profile store unavailable")

    context = SessionContext(broken_loader)
    context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u1", "u1@springfield.edu"))

    with pytest.raises(RuntimeError):
        await context.wait_until_ready()
    assert context.roles == ()
    assert context.is_loading is False


def test_callback_requires_a_running_loop():
    context = SessionContext(lambda user_id: None)
    with pytest.raises(RuntimeError):
        context.on_auth_state_change(AuthEvent.SIGNED_IN, SessionUser("u1", "u1@springfield.edu"))


async def test_loader_reads_profile_and_roles_from_store(db, admin, school):
    admin_id, _ = admin
    snapshot = await load_session_data(db, admin_id)

    assert snapshot.profile.school_id == school.id
    assert snapshot.profile.full_name == "Seymour Skinner"
    assert [grant.role for grant in snapshot.roles] == [AppRole.SCHOOL_ADMIN]
