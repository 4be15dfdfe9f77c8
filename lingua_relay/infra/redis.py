"""
Redis infrastructure configuration

Redis client used by the room lifecycle feed.
"""

from typing import Optional

from redis import asyncio as aioredis
from redis.asyncio import Redis

from lingua_relay.core.config import settings
from lingua_relay.core.logging import get_logger

logger = get_logger(__name__)

# Global redis pool
pool: Optional[aioredis.ConnectionPool] = None


async def init_redis_pool() -> None:
    """Initialize Redis connection pool"""
    global pool
    pool = aioredis.ConnectionPool.from_url(
        settings.redis_url,
        db=settings.redis_db,
        encoding="utf-8",
        decode_responses=True,
    )
    logger.info(f"Redis pool initialized for {settings.redis_url}")


async def close_redis_pool() -> None:
    """Close Redis connection pool"""
    global pool
    if pool:
        await pool.disconnect()
        pool = None


def get_redis() -> Redis:
    """Client bound to the shared pool; call init_redis_pool() first."""
    if pool is None:
        raise RuntimeError("Redis pool is not initialized")
    return aioredis.Redis(connection_pool=pool)
