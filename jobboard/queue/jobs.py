"""
Job functions executed by RQ workers.

Functions are referenced by import path when enqueued, so they must stay
importable from a fresh worker process. Progress and log lines are kept in
the job's ``meta`` so the dashboard can display them while the job runs.
"""

import logging
import random
import time
from typing import Any

from redis.exceptions import RedisError
from rq import Queue, get_current_job
from rq.job import Job

from jobboard.config import get_settings
from jobboard.constants import ERROR_FORWARD_TITLE, JOB_NAME_ERROR

logger = logging.getLogger(__name__)


class RandomJobError(Exception):
    """Raised by the example job to simulate an intermittent failure."""


class DemoJobError(Exception):
    """Raised by the error job, which always fails."""


def build_job_meta(name: str, data: dict[str, Any]) -> dict[str, Any]:
    """Initial ``meta`` stored with every job the board enqueues."""
    return {"name": name, "data": data, "progress": 0, "logs": []}


class JobReporter:
    """
    Reports progress and log lines for the job being executed.

    Outside a worker (no current job) reports are only logged.
    """

    def __init__(self, job: Job | None):
        self._job = job

    @property
    def job_id(self) -> str | None:
        return self._job.id if self._job is not None else None

    def update_progress(self, progress: int) -> None:
        if self._job is None:
            return
        self._job.meta["progress"] = progress
        self._job.save_meta()

    def log(self, message: str) -> None:
        logger.debug(message, extra={"job_id": self.job_id})
        if self._job is None:
            return
        self._job.meta.setdefault("logs", []).append(message)
        self._job.save_meta()


def forward_to_error_queue(job: Job | None, title: str = ERROR_FORWARD_TITLE) -> Job | None:
    """
    Enqueue an ``Error`` job on the configured error queue.

    Args:
        job: The failing job; its connection is reused.
        title: Title stored in the error job's data.

    Returns:
        The error job, or None when there is no current job to forward from.
    """
    if job is None:
        return None

    settings = get_settings()
    queue = Queue(settings.error_queue_name, connection=job.connection)
    error_job = queue.enqueue(
        process_error_job,
        title,
        description=JOB_NAME_ERROR,
        meta=build_job_meta(JOB_NAME_ERROR, {"title": title, "source_job_id": job.id}),
    )

    logger.info(
        "Forwarded failed job to error queue",
        extra={
            "job_id": job.id,
            "error_job_id": error_job.id,
            "queue": settings.error_queue_name,
        },
    )
    return error_job


def process_example_job(title: str | None = None) -> dict[str, str]:
    """
    Example job: walks through the configured number of steps.

    Each step sleeps a random fraction of ``example_job_max_step_seconds``,
    reports progress and a log line, and fails with probability
    ``example_job_error_rate``. Any failure, simulated or not, is forwarded to
    the error queue and re-raised so RQ records it.

    Args:
        title: Title supplied when the job was added.

    Returns:
        The job's return value.
    """
    settings = get_settings()
    job = get_current_job()
    reporter = JobReporter(job)
    steps = max(settings.example_job_steps, 1)

    logger.info("Example job starting", extra={"job_id": reporter.job_id, "title": title})

    try:
        for i in range(steps + 1):
            time.sleep(random.random() * settings.example_job_max_step_seconds)
            reporter.update_progress(round(i * 100 / steps))
            reporter.log(f"Processing job at interval {i}")

            if random.random() < settings.example_job_error_rate:
                raise RandomJobError(f"Random error {i}")
    except Exception as e:
        logger.warning(
            "Example job failed",
            extra={"job_id": reporter.job_id, "error": repr(e)},
        )
        try:
            forward_to_error_queue(job)
        except RedisError:
            logger.exception(
                "Could not forward to error queue",
                extra={"job_id": reporter.job_id},
            )
        raise

    return {"jobId": f"This is the return value of job ({reporter.job_id})"}


def process_error_job(title: str | None = None) -> None:
    """Error job: logs its title and always fails."""
    reporter = JobReporter(get_current_job())
    reporter.log(f"Processing error job: {title}")
    raise DemoJobError(f"Error job failed: {title}")
