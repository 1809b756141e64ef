"""
Queue module.
Contains the Redis connection, the active queue registry and job functions.
"""

from jobboard.queue.connection import (
    close_redis,
    create_redis_connection,
    get_redis,
    init_redis,
    ping_redis,
)
from jobboard.queue.registry import (
    JobNotFoundError,
    JobStateError,
    QueueExistsError,
    QueueNotFoundError,
    QueueRegistry,
    QueueRegistryError,
)

# Global registry instance
_registry: QueueRegistry | None = None


def init_queues(queue_names: list[str]) -> QueueRegistry:
    """
    Create the queue registry and activate the given queues.
    Requires the Redis connection to be initialized.
    """
    global _registry
    _registry = QueueRegistry(get_redis())
    for name in queue_names:
        if name not in _registry:
            _registry.create(name)
    return _registry


def get_queue_registry() -> QueueRegistry:
    """
    Dependency for getting the queue registry.

    Raises:
        RuntimeError: If the registry is not initialized.
    """
    if _registry is None:
        raise RuntimeError("Queues not initialized. Call init_queues() first.")
    return _registry


def close_queues() -> None:
    """Drop the queue registry."""
    global _registry
    _registry = None


__all__ = [
    "init_redis",
    "get_redis",
    "close_redis",
    "ping_redis",
    "create_redis_connection",
    "init_queues",
    "get_queue_registry",
    "close_queues",
    "QueueRegistry",
    "QueueRegistryError",
    "QueueExistsError",
    "QueueNotFoundError",
    "JobNotFoundError",
    "JobStateError",
]
