# edumanage/services/identity_service.py
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from edumanage.core.config import settings
from edumanage.core.errors import AuthenticationError, StoreError, store_error_from
from edumanage.core.security import get_password_hash, verify_password
from edumanage.models import AuthIdentity, Profile, RevokedToken
from edumanage.models.base import utcnow
from edumanage.schemas.auth import IdentityRead

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A user with this email address has already been registered"
INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"


def normalize_email(email: str) -> str:
    """Validate syntax only and return the normalized address"""
    try:
        return validate_email(email.strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError as e:
        raise StoreError(f"Unable to validate email address: {str(e)}")


class IdentityStore:
    """
    Owns login identities.

    Each call runs in its own session and commits on its own, independent of
    any tenant transaction the caller has open. Creating an identity also
    creates its profile row; deleting one cascades to the profile and roles.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create_identity(
        self,
        email: str,
        password: str,
        full_name: str = "",
        email_confirmed: bool = False,
        metadata: Optional[Dict[str, Any]] = None
    ) -> IdentityRead:
        address = normalize_email(email)
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise StoreError(f"Password should be at least {settings.MIN_PASSWORD_LENGTH} characters")

        user_metadata = dict(metadata or {})
        user_metadata.setdefault("full_name", full_name)

        async with self.session_factory() as session:
            existing = await session.execute(select(AuthIdentity.id).where(AuthIdentity.email == address))
            if existing.scalar_one_or_none() is not None:
                raise StoreError(DUPLICATE_EMAIL_MESSAGE)

            identity = AuthIdentity(
                email=address,
                password_hash=get_password_hash(password),
                email_confirmed=email_confirmed,
                user_metadata=user_metadata
            )
            session.add(identity)
            try:
                await session.flush()
                session.add(Profile(id=identity.id, email=address, full_name=full_name or ""))
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.info(f"Identity creation raced on {address}: {str(e.orig)}")
                raise StoreError(DUPLICATE_EMAIL_MESSAGE)
            except SQLAlchemyError as e:
                await session.rollback()
                raise store_error_from(e) from e

            logger.info(f"Created identity {identity.id}")
            return IdentityRead.model_validate(identity)

    async def delete_identity(self, user_id: str) -> bool:
        """Remove an identity; its profile and role rows go with it"""
        async with self.session_factory() as session:
            result = await session.execute(delete(AuthIdentity).where(AuthIdentity.id == user_id))
            await session.commit()
            deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted identity {user_id}")
        return deleted

    async def get_identity(self, user_id: str) -> Optional[IdentityRead]:
        async with self.session_factory() as session:
            identity = await session.get(AuthIdentity, user_id)
            return IdentityRead.model_validate(identity) if identity else None

    async def authenticate(self, email: str, password: str) -> IdentityRead:
        address = email.strip().lower()
        async with self.session_factory() as session:
            result = await session.execute(select(AuthIdentity).where(AuthIdentity.email == address))
            identity = result.scalar_one_or_none()
            if identity is None or not verify_password(password, identity.password_hash):
                logger.info(f"Failed sign-in attempt for {address}")
                raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

            identity.last_sign_in_at = utcnow()
            await session.commit()
            return IdentityRead.model_validate(identity)

    async def revoke_token(self, jti: str, user_id: str, expires_at: datetime) -> None:
        """Deny an access token until it expires; expired revocations are purged on the way"""
        async with self.session_factory() as session:
            try:
                await session.execute(delete(RevokedToken).where(RevokedToken.expires_at < utcnow()))
                if await session.get(RevokedToken, jti) is None:
                    session.add(RevokedToken(jti=jti, user_id=user_id, expires_at=expires_at))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise store_error_from(e) from e
        logger.info(f"Revoked token for user {user_id}")

    async def is_token_revoked(self, jti: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(select(RevokedToken.jti).where(RevokedToken.jti == jti))
            return result.scalar_one_or_none() is not None
