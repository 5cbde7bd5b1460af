# edumanage/services/auth_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.config import settings
from edumanage.core.errors import StoreError
from edumanage.core.security import create_access_token
from edumanage.core.session import SessionContext, SessionSnapshot
from edumanage.models import Profile, UserRole
from edumanage.schemas.auth import (
    LoginRequest,
    ProfileRead,
    RoleGrantRead,
    SessionResponse,
    SignUpRequest,
    SignUpResponse,
    TokenResponse,
)
from edumanage.schemas.enums import AppRole
from edumanage.services.identity_service import DUPLICATE_EMAIL_MESSAGE, IdentityStore

logger = logging.getLogger(__name__)


async def load_session_data(db: AsyncSession, user_id: str) -> SessionSnapshot:
    """Profile and every role grant of one user, as the session context expects them"""
    profile = await db.get(Profile, user_id)
    result = await db.execute(
        select(UserRole).where(UserRole.user_id == user_id).order_by(UserRole.created_at)
    )
    return SessionSnapshot(
        profile=ProfileRead.model_validate(profile) if profile else None,
        roles=[RoleGrantRead.model_validate(grant) for grant in result.scalars().all()]
    )


class AuthService:
    def __init__(self, db: AsyncSession, identity_store: IdentityStore):
        self.db = db
        self.identity_store = identity_store

    async def sign_in(self, request: LoginRequest) -> TokenResponse:
        identity = await self.identity_store.authenticate(request.email, request.password)
        logger.info(f"User {identity.id} signed in")
        return TokenResponse(
            access_token=create_access_token(identity.id, identity.email),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user_id=identity.id
        )

    async def sign_up(self, request: SignUpRequest) -> SignUpResponse:
        """Self-service account with a profile and no school or roles"""
        identity = await self.identity_store.create_identity(
            email=request.email,
            password=request.password,
            full_name=request.full_name
        )
        return SignUpResponse(user_id=identity.id, email=identity.email)

    async def sign_out(self, payload: Dict[str, Any]) -> None:
        """Revoke the presented access token for the rest of its lifetime"""
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        await self.identity_store.revoke_token(payload["jti"], payload["sub"], expires_at)
        logger.info(f"User {payload['sub']} signed out")

    @staticmethod
    def session_response(context: SessionContext) -> SessionResponse:
        return SessionResponse(
            user_id=context.user.id,
            email=context.user.email,
            profile=context.profile,
            roles=list(context.roles),
            primary_role=context.primary_role(),
            school_id=context.school_id
        )

    async def bootstrap_super_admin(self, email: Optional[str], password: Optional[str]) -> Optional[str]:
        """
        Make sure the configured platform operator exists and holds the
        platform-wide super_admin grant. Returns the operator's user id.
        """
        if not email or not password:
            return None

        try:
            identity = await self.identity_store.create_identity(
                email=email,
                password=password,
                full_name="Platform Administrator",
                email_confirmed=True
            )
            user_id = identity.id
        except StoreError as e:
            if e.message != DUPLICATE_EMAIL_MESSAGE:
                raise
            result = await self.db.execute(select(Profile.id).where(Profile.email == email.strip().lower()))
            user_id = result.scalar_one()

        existing = await self.db.execute(
            select(UserRole.id).where(
                UserRole.user_id == user_id,
                UserRole.role == AppRole.SUPER_ADMIN,
                UserRole.school_id.is_(None)
            )
        )
        if existing.scalar_one_or_none() is None:
            self.db.add(UserRole(user_id=user_id, role=AppRole.SUPER_ADMIN, school_id=None))
            await self.db.commit()
            logger.info(f"Granted super_admin to {user_id}")
        return user_id
