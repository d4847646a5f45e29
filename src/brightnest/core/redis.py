"""
Redis Configuration

Shared async Redis client. Its only consumer is the rate limiter guarding
the public registration endpoints, so Redis being down degrades limits to
per-process memory instead of failing requests.
"""

import logging

from redis.asyncio import Redis, from_url

from brightnest.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """Connect to Redis and verify the connection. Call on startup."""
    global redis_client
    redis_client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await redis_client.ping()
    return redis_client


async def get_redis() -> Redis | None:
    """Return the Redis client, or None when it was never initialized."""
    return redis_client


async def is_redis_healthy() -> bool:
    """Ping Redis; used by the readiness probe."""
    if redis_client is None:
        return False
    try:
        return bool(await redis_client.ping())
    except Exception as e:
        logger.warning(f"Redis ping failed: {e}")
        return False


async def close_redis() -> None:
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
