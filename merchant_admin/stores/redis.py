"""Redis store for short-lived security state.

Handles:
- Failed login counters per username (lockout window)
- Generic TTL key helpers

TTL policies:
- Login failure counters: settings.login_lockout_seconds (default 15 minutes)
"""

import logging

import redis.asyncio as redis

from merchant_admin.settings import get_settings

# Key prefixes
PREFIX_LOGIN_FAILURES = "login:failures:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


def _login_key(username: str) -> str:
    return f"{PREFIX_LOGIN_FAILURES}{username.strip().lower()}"


# ============================================================
# Generic key operations
# ============================================================


async def cache_get(key: str) -> str | None:
    """Get value from cache.

    Args:
        key: Cache key.

    Returns:
        Cached value or None if not found.
    """
    return await _get_redis().get(key)


async def cache_delete(key: str) -> None:
    """Delete value from cache.

    Args:
        key: Cache key.
    """
    await _get_redis().delete(key)


# ============================================================
# Login throttling
# ============================================================


async def get_login_failures(username: str) -> int:
    """Return the number of failed logins recorded in the current window."""
    value = await cache_get(_login_key(username))
    return int(value) if value else 0


async def record_login_failure(username: str, window: int) -> int:
    """Increment the failed login counter for a username.

    The window starts with the first failure; later failures do not extend it.

    Args:
        username: Login name as submitted.
        window: Lockout window in seconds.

    Returns:
        Failure count after increment.
    """
    key = _login_key(username)
    client = _get_redis()
    count = await client.incr(key)
    if count == 1:
        await client.expire(key, window)
    return int(count)


async def clear_login_failures(username: str) -> None:
    """Reset the failed login counter after a successful login."""
    await cache_delete(_login_key(username))
