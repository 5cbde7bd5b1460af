# edumanage/core/dependencies.py
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.cache import QueryCache, get_query_cache
from edumanage.core.database import AsyncSessionLocal, get_db
from edumanage.core.errors import AuthenticationError, AuthorizationError
from edumanage.core.notices import NoticeBoard
from edumanage.core.permissions import AuthorizationGate
from edumanage.core.security import extract_bearer_token, verify_token
from edumanage.core.session import AuthEvent, SessionContext, SessionUser
from edumanage.schemas.enums import SchoolAction
from edumanage.services.attendance_service import AttendanceService
from edumanage.services.auth_service import AuthService, load_session_data
from edumanage.services.class_service import ClassService
from edumanage.services.dashboard_service import DashboardService
from edumanage.services.identity_service import IdentityStore
from edumanage.services.provisioning_service import ProvisioningService
from edumanage.services.registration_service import RegistrationService
from edumanage.services.student_service import StudentService
from edumanage.services.subject_service import SubjectService
from edumanage.services.timetable_service import TimetableService

logger = logging.getLogger(__name__)


def get_identity_store() -> IdentityStore:
    """Identity store with its own sessions, independent of the request's tenant session"""
    return IdentityStore(AsyncSessionLocal)


def get_notices() -> NoticeBoard:
    return NoticeBoard()


# User authentication
async def get_token_payload(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
    return verify_token(extract_bearer_token(authorization))


async def get_current_user(
    payload: Dict[str, Any] = Depends(get_token_payload),
    identity_store: IdentityStore = Depends(get_identity_store)
) -> SessionUser:
    if await identity_store.is_token_revoked(payload["jti"]):
        raise AuthenticationError("Token has been revoked")

    identity = await identity_store.get_identity(payload["sub"])
    if identity is None:
        logger.info(f"Token presented for missing identity {payload['sub']}")
        raise AuthenticationError("Invalid token")
    return SessionUser(id=identity.id, email=identity.email)


async def get_session_context(
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> AsyncGenerator[SessionContext, None]:
    """Signed-in session for the duration of one request, torn down afterwards"""
    context = SessionContext(loader=partial(load_session_data, db))
    context.on_auth_state_change(AuthEvent.SIGNED_IN, user)
    await context.wait_until_ready()
    try:
        yield context
    finally:
        context.sign_out()


@dataclass(frozen=True)
class TenantScope:
    """Caller and resolved school for a gated request"""
    user_id: str
    school_id: str
    session: SessionContext


class SchoolAccess:
    """
    Dependency that resolves the caller's school from their profile and
    passes the authorization gate for the given action.
    """

    def __init__(self, action: SchoolAction):
        self.action = action

    async def __call__(
        self,
        context: SessionContext = Depends(get_session_context),
        db: AsyncSession = Depends(get_db)
    ) -> TenantScope:
        school_id = context.school_id
        if not school_id:
            raise AuthorizationError("No school is assigned to this account")
        await AuthorizationGate(db).authorize(context.user.id, school_id, self.action)
        return TenantScope(user_id=context.user.id, school_id=school_id, session=context)


view_school = SchoolAccess(SchoolAction.VIEW_SCHOOL)
manage_school = SchoolAccess(SchoolAction.MANAGE_SCHOOL)
mark_attendance = SchoolAccess(SchoolAction.MARK_ATTENDANCE)


# Service providers
async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    identity_store: IdentityStore = Depends(get_identity_store)
) -> AuthService:
    return AuthService(db, identity_store)


async def get_registration_service(
    db: AsyncSession = Depends(get_db),
    identity_store: IdentityStore = Depends(get_identity_store),
    cache: QueryCache = Depends(get_query_cache),
    notices: NoticeBoard = Depends(get_notices)
) -> RegistrationService:
    return RegistrationService(db, identity_store, cache, notices)


async def get_provisioning_service(
    db: AsyncSession = Depends(get_db),
    identity_store: IdentityStore = Depends(get_identity_store),
    cache: QueryCache = Depends(get_query_cache),
    notices: NoticeBoard = Depends(get_notices)
) -> ProvisioningService:
    return ProvisioningService(db, identity_store, AuthorizationGate(db), cache, notices)


async def get_class_service(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    notices: NoticeBoard = Depends(get_notices)
) -> ClassService:
    return ClassService(db, cache, notices)


async def get_subject_service(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    notices: NoticeBoard = Depends(get_notices)
) -> SubjectService:
    return SubjectService(db, cache, notices)


async def get_timetable_service(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    notices: NoticeBoard = Depends(get_notices)
) -> TimetableService:
    return TimetableService(db, cache, notices)


async def get_student_service(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    notices: NoticeBoard = Depends(get_notices)
) -> StudentService:
    return StudentService(db, cache, notices)


async def get_attendance_service(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
    notices: NoticeBoard = Depends(get_notices)
) -> AttendanceService:
    return AttendanceService(db, cache, notices)


async def get_dashboard_service(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache)
) -> DashboardService:
    return DashboardService(db, cache)
