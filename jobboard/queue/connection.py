"""
Redis connection management.
Handles the connection shared by the API process and its RQ queues.
"""

import logging

from redis import Redis
from redis.exceptions import RedisError

from jobboard.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Global connection instance
_redis: Redis | None = None


def create_redis_connection(settings: Settings | None = None) -> Redis:
    """
    Create a new Redis connection from settings.

    RQ stores pickled job data, so responses are left as bytes.

    Args:
        settings: Settings to use. Defaults to the cached application settings.

    Returns:
        Redis: A new Redis client.
    """
    settings = settings or get_settings()
    return Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
        ssl=settings.redis_tls,
    )


def init_redis(connection: Redis | None = None) -> Redis:
    """
    Initialize the global Redis connection.
    Should be called on application startup.

    Args:
        connection: Optional pre-built client, e.g. an in-memory one for tests.

    Returns:
        Redis: The installed client.
    """
    global _redis
    _redis = connection if connection is not None else create_redis_connection()
    logger.info(
        "Redis connection initialized",
        extra={"redis_url": get_settings().redis_url_masked},
    )
    return _redis


def get_redis() -> Redis:
    """
    Get the global Redis connection.

    Raises:
        RuntimeError: If the connection is not initialized.
    """
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


def close_redis() -> None:
    """
    Close the Redis connection.
    Should be called on application shutdown.
    """
    global _redis
    if _redis is not None:
        _redis.close()
        _redis = None
        logger.info("Redis connection closed")


def ping_redis() -> bool:
    """Check whether Redis answers a PING."""
    try:
        return bool(get_redis().ping())
    except (RedisError, RuntimeError):
        return False
