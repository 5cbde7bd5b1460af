# edumanage/services/provisioning_service.py
import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.cache import QueryCache
from edumanage.core.errors import (
    BaseAPIError,
    NotFoundError,
    PartialFailureError,
    ValidationError,
)
from edumanage.core.logging import log_function_call
from edumanage.core.notices import NoticeBoard
from edumanage.core.permissions import AuthorizationGate
from edumanage.models import Profile, UserRole
from edumanage.schemas.enums import PROVISIONABLE_ROLES, AppRole, SchoolAction
from edumanage.schemas.user import (
    CreateUserRequest,
    DeleteUserRequest,
    ListUsersRequest,
    SchoolUser,
    SchoolUserProfile,
)
from .base_service import BaseService
from .identity_service import IdentityStore

logger = logging.getLogger(__name__)

INVALID_ROLE_MESSAGE = "Invalid role. Must be teacher, parent, or student"


class ProvisioningService(BaseService):
    """
    Privileged user management for one school.

    Every operation passes the authorization gate first. Account creation
    spans two stores: the identity store commits the login (and its profile)
    on its own, then the tenant session attaches the profile to the school
    and grants the role. If the second half fails the identity is deleted
    again so no half-provisioned account is left behind.
    """

    def __init__(
        self,
        db: AsyncSession,
        identity_store: IdentityStore,
        gate: Optional[AuthorizationGate] = None,
        cache: Optional[QueryCache] = None,
        notices: Optional[NoticeBoard] = None
    ):
        super().__init__(db, cache, notices)
        self.identity_store = identity_store
        self.gate = gate or AuthorizationGate(db)

    @staticmethod
    def parse_role(role: str) -> AppRole:
        try:
            parsed = AppRole(role)
        except ValueError:
            raise ValidationError(INVALID_ROLE_MESSAGE)
        if parsed not in PROVISIONABLE_ROLES:
            raise ValidationError(INVALID_ROLE_MESSAGE)
        return parsed

    @log_function_call(logger)
    async def create_user(self, caller_id: str, request: CreateUserRequest) -> str:
        await self.gate.authorize(caller_id, request.school_id, SchoolAction.CREATE_USER)
        role = self.parse_role(request.role)

        identity = await self.identity_store.create_identity(
            email=request.email,
            password=request.password,
            full_name=request.full_name,
            email_confirmed=True
        )

        try:
            await self.attach_to_school(identity.id, request.school_id, request.full_name, role)
            await self.db.commit()
        except (SQLAlchemyError, BaseAPIError) as e:
            await self.db.rollback()
            logger.error(f"Provisioning {identity.id} into school {request.school_id} failed: {str(e)}")
            await self._compensate(identity.id)
            raise PartialFailureError(f"Failed to assign {role.value} role; the account was not created")

        await self.cache.invalidate(("school-users", request.school_id), ("school-parents", request.school_id))
        self.notices.success(f"{role.value.capitalize()} added successfully")
        logger.info(f"User {caller_id} provisioned {role.value} {identity.id} in school {request.school_id}")
        return identity.id

    async def attach_to_school(self, user_id: str, school_id: str, full_name: str, role: AppRole) -> None:
        profile = await self.db.get(Profile, user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        profile.school_id = school_id
        profile.full_name = full_name
        self.db.add(UserRole(user_id=user_id, role=role, school_id=school_id))
        await self.db.flush()

    async def _compensate(self, user_id: str) -> None:
        try:
            await self.identity_store.delete_identity(user_id)
        except SQLAlchemyError as e:
            logger.critical(f"Orphaned identity {user_id} could not be removed: {str(e)}")
            raise PartialFailureError(f"Account {user_id} was created but could not be cleaned up")

    async def list_users(self, caller_id: str, request: ListUsersRequest) -> List[SchoolUser]:
        await self.gate.authorize(caller_id, request.school_id, SchoolAction.LIST_USERS)

        role = None
        if request.role:
            try:
                role = AppRole(request.role)
            except ValueError:
                raise ValidationError(f"Invalid role filter: {request.role}")

        role_key = role.value if role else None
        return await self.cached(
            ("school-users", request.school_id, role_key),
            lambda: self._load_users(request.school_id, role),
            List[SchoolUser]
        )

    async def _load_users(self, school_id: str, role: Optional[AppRole]) -> List[SchoolUser]:
        query = (
            select(UserRole, Profile)
            .outerjoin(Profile, Profile.id == UserRole.user_id)
            .where(UserRole.school_id == school_id)
            .order_by(UserRole.created_at.desc())
        )
        if role is not None:
            query = query.where(UserRole.role == role)

        result = await self.db.execute(query)
        return [
            SchoolUser(
                id=grant.id,
                role=grant.role,
                user_id=grant.user_id,
                created_at=grant.created_at,
                profiles=SchoolUserProfile.model_validate(profile) if profile else None
            )
            for grant, profile in result.all()
        ]

    async def delete_user(self, caller_id: str, request: DeleteUserRequest) -> None:
        """
        Revoke every role the user holds in the school. The identity is kept;
        the profile is detached only when no role is left anywhere.
        """
        await self.gate.authorize(caller_id, request.school_id, SchoolAction.DELETE_USER)

        async def revoke():
            await self.db.execute(
                delete(UserRole).where(
                    UserRole.user_id == request.user_id,
                    UserRole.school_id == request.school_id
                )
            )
            remaining = await self.db.scalar(
                select(func.count()).select_from(UserRole).where(UserRole.user_id == request.user_id)
            )
            if remaining == 0:
                profile = await self.db.get(Profile, request.user_id)
                if profile is not None:
                    profile.school_id = None

        await self.mutate(
            revoke,
            success="User removed successfully",
            failure="Failed to remove user",
            invalidate=[("school-users", request.school_id), ("school-parents", request.school_id)]
        )
        logger.info(f"User {caller_id} removed {request.user_id} from school {request.school_id}")
