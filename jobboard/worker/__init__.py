"""
Worker module.
Contains the RQ worker entrypoint and the pool of worker processes
spawned by the API server.
"""

from jobboard.worker.pool import WorkerPool, WorkerProcess

# Global pool instance
_pool: WorkerPool | None = None


def get_worker_pool() -> WorkerPool:
    """Get the worker pool, creating it on first use."""
    global _pool
    if _pool is None:
        _pool = WorkerPool()
    return _pool


def set_worker_pool(pool: WorkerPool | None) -> None:
    """Install a worker pool, or clear it with None."""
    global _pool
    _pool = pool


__all__ = ["WorkerPool", "WorkerProcess", "get_worker_pool", "set_worker_pool"]
