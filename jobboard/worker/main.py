"""
Worker process for executing jobs.

Each worker is an RQ worker running with its scheduler enabled, so delayed
jobs are moved onto their queue once due and failed jobs with retries left
are re-enqueued. RQ installs its own SIGTERM/SIGINT handlers and finishes
the current job before exiting (warm shutdown).
"""

import logging

from rq import Worker

from jobboard.config import get_settings
from jobboard.queue.connection import create_redis_connection
from jobboard.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def run_worker_process(
    queue_names: list[str],
    burst: bool = False,
    name: str | None = None,
) -> None:
    """
    Run an RQ worker in the current process.

    Used as the target of processes spawned by the API server and by the
    standalone worker command.

    Args:
        queue_names: Queues to consume, in priority order.
        burst: If True, exit once the queues are empty.
        name: Worker name. RQ generates one when omitted.
    """
    setup_logging(process_name=name or "worker")
    connection = create_redis_connection()

    worker = Worker(queue_names, connection=connection, name=name)

    logger.info(
        "Worker starting",
        extra={"worker": worker.name, "queues": queue_names, "burst": burst},
    )

    try:
        worker.work(with_scheduler=True, burst=burst)
    finally:
        connection.close()
        logger.info("Worker stopped", extra={"worker": worker.name})


def run() -> None:
    """Run a standalone worker for the configured queues."""
    settings = get_settings()
    run_worker_process(settings.worker_queues)


if __name__ == "__main__":
    run()
