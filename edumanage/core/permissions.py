# edumanage/core/permissions.py
import logging
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.errors import AuthorizationError
from edumanage.models import UserRole
from edumanage.schemas.enums import AppRole, SchoolAction

logger = logging.getLogger(__name__)


class ActionPolicy:
    """Roles that satisfy each school-scoped action"""
    REQUIRED_ROLES: Dict[SchoolAction, FrozenSet[AppRole]] = {
        SchoolAction.CREATE_USER: frozenset({AppRole.SCHOOL_ADMIN}),
        SchoolAction.DELETE_USER: frozenset({AppRole.SCHOOL_ADMIN}),
        SchoolAction.LIST_USERS: frozenset({AppRole.SCHOOL_ADMIN, AppRole.TEACHER}),
        SchoolAction.MANAGE_SCHOOL: frozenset({AppRole.SCHOOL_ADMIN}),
        SchoolAction.MARK_ATTENDANCE: frozenset({AppRole.SCHOOL_ADMIN, AppRole.TEACHER}),
        SchoolAction.VIEW_SCHOOL: frozenset(AppRole),
    }

    DENIAL_MESSAGES: Dict[SchoolAction, str] = {
        SchoolAction.CREATE_USER: "Only school admins can add users",
        SchoolAction.DELETE_USER: "Only school admins can remove users",
        SchoolAction.LIST_USERS: "Access denied",
        SchoolAction.MANAGE_SCHOOL: "Only school admins can manage school records",
        SchoolAction.MARK_ATTENDANCE: "Only school admins and teachers can mark attendance",
        SchoolAction.VIEW_SCHOOL: "Not a member of this school",
    }

    @classmethod
    def required_roles(cls, action: SchoolAction) -> FrozenSet[AppRole]:
        return cls.REQUIRED_ROLES[action]


class AuthorizationGate:
    """
    Decides whether a caller may perform an action inside one school.

    Stateless: every call re-reads the caller's role rows for the target school,
    so a revoked role stops working on the very next request.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def matching_roles(
        self,
        caller_id: str,
        school_id: str,
        action: SchoolAction
    ) -> List[AppRole]:
        required = ActionPolicy.required_roles(action)
        result = await self.db.execute(
            select(UserRole.role).where(
                UserRole.user_id == caller_id,
                UserRole.school_id == school_id,
                UserRole.role.in_(list(required))
            )
        )
        return list(result.scalars().all())

    async def is_allowed(self, caller_id: str, school_id: Optional[str], action: SchoolAction) -> bool:
        if not caller_id or not school_id:
            return False
        return bool(await self.matching_roles(caller_id, school_id, action))

    async def authorize(self, caller_id: str, school_id: Optional[str], action: SchoolAction) -> None:
        """Raise AuthorizationError unless the caller holds a qualifying role in the school"""
        if not await self.is_allowed(caller_id, school_id, action):
            logger.warning(
                f"Permission denied: user {caller_id} attempted {action.value} on school {school_id}",
                extra={"user_id": caller_id, "school_id": school_id, "action": action.value}
            )
            raise AuthorizationError(ActionPolicy.DENIAL_MESSAGES[action])
