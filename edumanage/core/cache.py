# edumanage/core/cache.py
import logging
import re
from functools import lru_cache
from typing import Any, Awaitable, Callable, Hashable, List, Optional, Tuple, TypeVar

from pydantic import TypeAdapter
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from edumanage.core.config import settings
from edumanage.core.redis import get_redis_client

logger = logging.getLogger(__name__)

T = TypeVar("T")
CacheKey = Tuple[Hashable, ...]

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


def _glob_escape(value: str) -> str:
    return _GLOB_SPECIAL.sub(r"\\\1", value)


class QueryCache:
    """
    Read-through cache for tenant-scoped query results, stored in Redis so
    every worker sees the same entries and the same invalidations.

    Keys are tuples whose first elements name the resource and the school, e.g.
    ("classes", school_id) or ("attendance", school_id, class_id, date).
    Invalidation works on key prefixes, so ("attendance", school_id) drops every
    cached attendance read for that school.

    Values are stored as JSON and validated back into `schema` on read.
    A Redis failure on read or write counts as a miss; a failure while
    invalidating is raised, since the entries it should have removed are
    still there.
    """

    def __init__(
        self,
        client: aioredis.Redis,
        ttl_seconds: int = 300,
        namespace: str = "edumanage:cache"
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.namespace = namespace

    def key_for(self, key: CacheKey) -> str:
        parts = ["" if part is None else str(part) for part in key]
        return ":".join([self.namespace, *parts])

    async def get(self, key: CacheKey, schema: Any = Any) -> Optional[Any]:
        name = self.key_for(key)
        try:
            raw = await self.client.get(name)
        except RedisError as e:
            logger.warning(f"Query cache read failed for {name}: {str(e)}")
            return None
        if raw is None:
            return None
        return _adapter(schema).validate_json(raw)

    async def set(self, key: CacheKey, value: Any, schema: Any = Any) -> None:
        name = self.key_for(key)
        payload = _adapter(schema).dump_json(value)
        try:
            await self.client.set(name, payload, ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning(f"Query cache write failed for {name}: {str(e)}")

    async def exists(self, key: CacheKey) -> bool:
        return bool(await self.client.exists(self.key_for(key)))

    async def get_or_load(
        self,
        key: CacheKey,
        loader: Callable[[], Awaitable[T]],
        schema: Any = Any
    ) -> T:
        cached = await self.get(key, schema)
        if cached is not None:
            return cached
        value = await loader()
        await self.set(key, value, schema)
        return value

    async def invalidate(self, *prefixes: CacheKey) -> int:
        """Drop every entry whose key starts with one of the prefixes"""
        if not prefixes:
            return 0
        try:
            doomed = await self._matching(prefixes)
            removed = await self.client.delete(*doomed) if doomed else 0
        except RedisError as e:
            logger.error(f"Query cache invalidation failed for {prefixes}: {str(e)}")
            raise
        if removed:
            logger.debug(f"Invalidated {removed} cached queries")
        return removed

    async def clear(self) -> int:
        try:
            doomed = [name async for name in self.client.scan_iter(match=f"{_glob_escape(self.namespace)}:*")]
            return await self.client.delete(*doomed) if doomed else 0
        except RedisError as e:
            logger.error(f"Query cache clear failed: {str(e)}")
            raise

    async def _matching(self, prefixes) -> List[str]:
        names = set()
        for prefix in prefixes:
            name = self.key_for(prefix)
            names.add(name)
            async for match in self.client.scan_iter(match=f"{_glob_escape(name)}:*"):
                names.add(match)
        return sorted(names)


def get_query_cache() -> QueryCache:
    return QueryCache(
        get_redis_client(),
        ttl_seconds=settings.QUERY_CACHE_TTL_SECONDS,
        namespace=settings.QUERY_CACHE_NAMESPACE
    )
