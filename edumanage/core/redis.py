# edumanage/core/redis.py
import logging
from typing import Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from edumanage.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Optional[aioredis.Redis] = None


def get_redis_client() -> aioredis.Redis:
    """Shared client; the connection pool connects lazily on first command"""
    global redis_client
    if redis_client is None:
        redis_client = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    return redis_client


async def init_redis() -> aioredis.Redis:
    """Initialize Redis connection"""
    client = get_redis_client()
    try:
        await client.ping()
    except RedisError as e:
        logger.error(f"Failed to connect to Redis: {str(e)}")
        raise
    logger.info("Redis connection established successfully")
    return client


async def close_redis() -> None:
    """Close Redis connection"""
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")
