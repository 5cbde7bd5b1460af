# edumanage/services/base_service.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Iterable, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.cache import CacheKey, QueryCache, get_query_cache
from edumanage.core.errors import BaseAPIError, NotFoundError, store_error_from
from edumanage.core.notices import NoticeBoard
from edumanage.models import TenantModel

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=TenantModel)


class BaseService:
    """
    Shared plumbing for tenant-scoped services.

    Reads go through the query cache under keys that start with the resource
    name and the school id. Mutations run inside `mutate`, which commits, then
    invalidates the affected keys and posts a success notice; on failure it
    rolls back, posts an error notice with the store's message and re-raises
    without touching the cache.
    """

    def __init__(
        self,
        db: AsyncSession,
        cache: Optional[QueryCache] = None,
        notices: Optional[NoticeBoard] = None
    ):
        self.db = db
        self.cache = cache if cache is not None else get_query_cache()
        self.notices = notices if notices is not None else NoticeBoard()

    @asynccontextmanager
    async def transaction(self):
        """Commit on success, roll back and translate store failures otherwise"""
        try:
            yield
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise store_error_from(e) from e
        except Exception:
            await self.db.rollback()
            raise

    async def mutate(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        success: str,
        failure: str,
        invalidate: Iterable[CacheKey] = ()
    ) -> T:
        try:
            async with self.transaction():
                result = await operation()
        except BaseAPIError as e:
            self.notices.error(e.message or failure)
            raise

        # Only after the commit is acknowledged
        await self.cache.invalidate(*invalidate)
        self.notices.success(success)
        return result

    async def cached(self, key: CacheKey, loader: Callable[[], Awaitable[T]], schema: Any = Any) -> T:
        """Serve `key` from the query cache, loading and storing it as `schema` on a miss"""
        return await self.cache.get_or_load(key, loader, schema)

    async def get_scoped(self, model: Type[M], row_id: str, school_id: str, label: str) -> M:
        """Fetch a row by primary key inside the caller's school; other tenants' rows do not exist"""
        result = await self.db.execute(
            select(model).where(model.id == row_id, model.school_id == school_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"{label} not found")
        return row

    @staticmethod
    def apply_changes(row: Any, changes: dict) -> None:
        for key, value in changes.items():
            setattr(row, key, value)
