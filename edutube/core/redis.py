# ruff: noqa: PLW0603
"""Redis connection management.

Provides the synchronous Redis client backing the progress store. Progress
reads and writes are single-key get/set calls, so no async client is used.
"""

import redis

from edutube.config import get_settings
from edutube.core.logging import get_logger


logger = get_logger(__name__)

# Global Redis client
_redis_client: redis.Redis | None = None


def init_redis() -> redis.Redis:
    """Initialize the Redis client and verify the connection."""
    global _redis_client

    settings = get_settings()

    client = redis.Redis.from_url(
        settings.redis_url,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        retry_on_timeout=settings.redis_retry_on_timeout,
        health_check_interval=settings.redis_health_check_interval,
        decode_responses=True,
    )

    try:
        client.ping()
    except redis.ConnectionError as e:
        logger.warning("redis_connection_failed", error=str(e))
        client.close()
        raise

    _redis_client = client
    logger.info("redis_connected", url=settings.redis_url)
    return _redis_client


def shutdown_redis() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client:
        _redis_client.close()
        logger.info("redis_disconnected")
        _redis_client = None


def get_redis() -> redis.Redis | None:
    """Get Redis client instance."""
    return _redis_client
