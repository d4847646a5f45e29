"""
Rate Limiting Module

Sliding-window rate limiting for the unauthenticated parent registration
endpoints (waitlist submission, payment session, public document upload).
Uses the shared Redis client and falls back to in-process memory when Redis
is unavailable.
"""

import logging
import time

from fastapi import HTTPException, Request, status
from redis.asyncio import Redis

from brightnest.core.redis import get_redis

logger = logging.getLogger(__name__)

# Fallback storage: {key: [expiry timestamp, ...]}
_memory_store: dict[str, list[float]] = {}
_MEMORY_PRUNE_THRESHOLD = 1000


class RateLimitExceeded(HTTPException):
    """Raised when a caller exceeds a rate limit."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Sliding window check backed by a Redis sorted set.

    Returns:
        True if the request is allowed
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _prune_memory_store(now: float) -> None:
    """Drop keys whose hits have all expired."""
    stale = [key for key, expiries in _memory_store.items() if not expiries or expiries[-1] <= now]
    for key in stale:
        del _memory_store[key]


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Sliding window check in process memory.

    Only used when Redis is unavailable; limits are per process. Each hit is
    stored as the time it expires, and idle keys are pruned once the store
    grows past _MEMORY_PRUNE_THRESHOLD.
    """
    now = time.time()

    if len(_memory_store) >= _MEMORY_PRUNE_THRESHOLD:
        _prune_memory_store(now)

    expiries = [ts for ts in _memory_store.get(key, []) if ts > now]
    if len(expiries) >= limit:
        _memory_store[key] = expiries
        return False

    expiries.append(now + window_seconds)
    _memory_store[key] = expiries
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check whether a request identified by ``key`` is within limits.

    Tries Redis first, falls back to memory.
    """
    client = await get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def enforce_public_rate_limit(
    request: Request,
    action: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Rate limit an unauthenticated action per client IP.

    Raises:
        RateLimitExceeded: When the caller is over the limit (HTTP 429)
    """
    key = f"rate_limit:public:{action}:{client_ip(request)}"
    allowed = await check_rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "RateLimitExceeded",
    "check_rate_limit",
    "client_ip",
    "enforce_public_rate_limit",
]
