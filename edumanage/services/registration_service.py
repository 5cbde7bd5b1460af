# edumanage/services/registration_service.py
import logging
import re
from typing import Optional, Tuple

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.cache import QueryCache
from edumanage.core.config import settings
from edumanage.core.errors import (
    BaseAPIError,
    ConflictError,
    NotFoundError,
    PartialFailureError,
    ValidationError,
    store_error_from,
)
from edumanage.core.notices import NoticeBoard
from edumanage.models import Profile, School, UserRole
from edumanage.schemas.auth import SchoolRegistrationRequest
from edumanage.schemas.enums import AppRole
from edumanage.services.identity_service import IdentityStore
from .base_service import BaseService

logger = logging.getLogger(__name__)

DUPLICATE_SCHOOL_MESSAGE = "A school with this name already exists"
REGISTRATION_SUCCESS_MESSAGE = "Registration successful! You can now sign in."


def generate_slug(name: str) -> str:
    """Lowercase, collapse every run of non-alphanumerics to '-', trim dashes"""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class RegistrationService(BaseService):
    """
    Public school registration: creates the school, then its first admin.
    Each step commits on its own; a later failure undoes the earlier ones.
    """

    def __init__(
        self,
        db: AsyncSession,
        identity_store: IdentityStore,
        cache: Optional[QueryCache] = None,
        notices: Optional[NoticeBoard] = None
    ):
        super().__init__(db, cache, notices)
        self.identity_store = identity_store

    def _check_passwords(self, request: SchoolRegistrationRequest) -> None:
        if request.password != request.confirm_password:
            raise ValidationError("Passwords do not match")
        if len(request.password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")

    async def register_school(self, request: SchoolRegistrationRequest) -> Tuple[School, str]:
        try:
            self._check_passwords(request)
            school = await self._create_school(request)
            user_id = await self._create_admin(school, request)
        except BaseAPIError as e:
            self.notices.error(e.message)
            raise

        self.notices.success(REGISTRATION_SUCCESS_MESSAGE)
        logger.info(f"Registered school {school.slug} with admin {user_id}")
        return school, user_id

    async def _create_school(self, request: SchoolRegistrationRequest) -> School:
        slug = generate_slug(request.school_name)
        if not slug:
            raise ValidationError("School name must contain letters or digits")

        school = School(name=request.school_name.strip(), slug=slug, email=request.school_email)
        self.db.add(school)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(DUPLICATE_SCHOOL_MESSAGE)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise store_error_from(e) from e
        return school

    async def _create_admin(self, school: School, request: SchoolRegistrationRequest) -> str:
        try:
            identity = await self.identity_store.create_identity(
                email=request.email,
                password=request.password,
                full_name=request.full_name,
                metadata={"school_id": school.id}
            )
        except BaseAPIError:
            await self._remove_school(school.id)
            raise

        try:
            profile = await self.db.get(Profile, identity.id)
            if profile is None:
                raise NotFoundError("Profile not found")
            profile.school_id = school.id
            profile.full_name = request.full_name
            self.db.add(UserRole(user_id=identity.id, role=AppRole.SCHOOL_ADMIN, school_id=school.id))
            await self.db.commit()
        except (SQLAlchemyError, BaseAPIError) as e:
            await self.db.rollback()
            logger.error(f"Attaching admin {identity.id} to school {school.id} failed: {str(e)}")
            await self.identity_store.delete_identity(identity.id)
            await self._remove_school(school.id)
            raise PartialFailureError("Failed to set up the school administrator")

        return identity.id

    async def _remove_school(self, school_id: str) -> None:
        await self.db.execute(delete(School).where(School.id == school_id))
        await self.db.commit()
        logger.info(f"Rolled back registration of school {school_id}")
