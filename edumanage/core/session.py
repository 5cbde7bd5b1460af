# edumanage/core/session.py
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Set, Tuple

from edumanage.schemas.auth import ProfileRead, RoleGrantRead
from edumanage.schemas.enums import ROLE_PRIORITY, AppRole

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str


@dataclass
class SessionSnapshot:
    profile: Optional[ProfileRead] = None
    roles: List[RoleGrantRead] = field(default_factory=list)


SessionLoader = Callable[[str], Awaitable[SessionSnapshot]]


class SessionContext:
    """
    Authenticated user plus their profile and role grants.

    Auth callbacks never await the store. A state change records the user and
    schedules the profile/role fetch on the running loop; each schedule bumps
    a generation counter so a refresh that finishes after a newer event (or
    after sign-out) is discarded instead of resurrecting stale state.
    """

    def __init__(self, loader: SessionLoader):
        self._loader = loader
        self.user: Optional[SessionUser] = None
        self.profile: Optional[ProfileRead] = None
        self.roles: Tuple[RoleGrantRead, ...] = ()
        self.is_loading = True
        self._generation = 0
        self._pending: Set[asyncio.Task] = set()

    def on_auth_state_change(self, event: AuthEvent, user: Optional[SessionUser] = None) -> None:
        """Synchronous auth callback; must be invoked from inside a running event loop"""
        logger.debug(f"Auth state change: {event.value}")

        if event is AuthEvent.SIGNED_OUT or user is None:
            self._teardown()
            self.is_loading = False
            return

        self.user = user
        self._generation += 1
        self.is_loading = True
        self._schedule_refresh(user.id, self._generation)

    def sign_out(self) -> None:
        self.on_auth_state_change(AuthEvent.SIGNED_OUT)

    def _schedule_refresh(self, user_id: str, generation: int) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._refresh(user_id, generation))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _is_current(self, user_id: str, generation: int) -> bool:
        return generation == self._generation and self.user is not None and self.user.id == user_id

    async def _refresh(self, user_id: str, generation: int) -> None:
        try:
            snapshot = await self._loader(user_id)
        except Exception:
            if self._is_current(user_id, generation):
                self.is_loading = False
            raise
        if not self._is_current(user_id, generation):
            logger.debug(f"Discarding stale session refresh for user {user_id}")
            return
        self.profile = snapshot.profile
        self.roles = tuple(snapshot.roles)
        self.is_loading = False

    async def refresh(self) -> None:
        """Re-fetch profile and roles for the current user now"""
        if self.user is None:
            return
        self._generation += 1
        await self._refresh(self.user.id, self._generation)

    async def wait_until_ready(self) -> None:
        """Wait for scheduled refreshes; a failed fetch re-raises here"""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _teardown(self) -> None:
        self._generation += 1
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()
        self.user = None
        self.profile = None
        self.roles = ()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def school_id(self) -> Optional[str]:
        return self.profile.school_id if self.profile else None

    def has_role(self, role: AppRole, school_id: Optional[str] = None) -> bool:
        """True if any grant matches the role and, when given, the school"""
        return any(
            grant.role == role and (school_id is None or grant.school_id == school_id)
            for grant in self.roles
        )

    def primary_role(self) -> Optional[AppRole]:
        held = {grant.role for grant in self.roles}
        for role in ROLE_PRIORITY:
            if role in held:
                return role
        return None
