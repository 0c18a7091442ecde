# ruff: noqa: PLW0603
"""Redis connection management.

The Redis client backs the remote plugin configuration store. It is
optional: without ``REDIS_URL`` the engine resolves configuration from the
local static tree only.
"""

import redis.asyncio as redis

from comment_engine.config import Settings, get_settings
from comment_engine.core.logging import get_logger


logger = get_logger(__name__)

_redis_client: redis.Redis | None = None


async def init_redis(settings: Settings | None = None) -> redis.Redis | None:
    """Initialize the Redis connection pool, if a URL is configured."""
    global _redis_client

    settings = settings or get_settings()
    if not settings.remote_config_enabled:
        logger.info("redis_disabled")
        return None

    _redis_client = redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        decode_responses=True,
    )

    try:
        await _redis_client.ping()
        logger.info("redis_connected", redis_url=settings.redis_url)
    except redis.ConnectionError as e:
        logger.warning("redis_connection_failed", error=str(e))
        _redis_client = None
        raise

    return _redis_client


async def shutdown_redis() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client:
        await _redis_client.aclose()
        logger.info("redis_disconnected")
        _redis_client = None


def get_redis() -> redis.Redis | None:
    """Get Redis client instance."""
    return _redis_client
