"""
Registry of active queues.

Queue state lives in Redis and is managed by RQ. The registry only tracks
which queues are *active*: the ones shown on the dashboard and accepted by
the control API. Deactivating a queue leaves its Redis data in place.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from datetime import timedelta
from typing import Any

from redis import Redis
from rq import Queue, Retry
from rq.exceptions import NoSuchJobError
from rq.job import Job, JobStatus
from rq.registry import BaseRegistry
from rq.results import Result

from jobboard.constants import (
    MSG_QUEUE_EXISTS,
    MSG_QUEUE_NOT_FOUND,
    SPAN_ENQUEUE_JOB,
    JobState,
)
from jobboard.observability.metrics import get_metrics
from jobboard.observability.tracing import traced
from jobboard.queue.jobs import build_job_meta
from jobboard.types.job import JobDetail, JobOptions, JobSummary, QueueSummary

logger = logging.getLogger(__name__)

JobFunc = Callable[..., Any]


class QueueRegistryError(Exception):
    """Base error for queue and job lookups, carrying an HTTP status."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QueueExistsError(QueueRegistryError):
    """Raised when activating a queue that is already active."""

    status_code = 400


class QueueNotFoundError(QueueRegistryError):
    """Raised when a queue is not active."""

    status_code = 404


class JobNotFoundError(QueueRegistryError):
    """Raised when a job does not exist in the given queue."""

    status_code = 404


class JobStateError(QueueRegistryError):
    """Raised when an action does not apply to the job's current state."""

    status_code = 400


def enqueue_options(opts: JobOptions) -> dict[str, Any]:
    """
    Translate job options into RQ enqueue keyword arguments.

    Args:
        opts: Options supplied by the client.

    Returns:
        Keyword arguments for ``Queue.enqueue`` / ``Queue.enqueue_in``.
    """
    kwargs: dict[str, Any] = {}

    if opts.job_id:
        kwargs["job_id"] = opts.job_id
    if opts.attempts and opts.attempts > 1:
        kwargs["retry"] = Retry(max=opts.attempts - 1, interval=opts.backoff or 0)
    if opts.timeout:
        kwargs["job_timeout"] = opts.timeout
    if opts.remove_on_complete:
        kwargs["result_ttl"] = 0
    if opts.remove_on_fail:
        kwargs["failure_ttl"] = 0
    if opts.lifo:
        kwargs["at_front"] = True

    return kwargs


class QueueRegistry:
    """
    Map of active queue name to ``rq.Queue``.

    Thread-safe: FastAPI runs the synchronous route handlers that use it
    from a thread pool.
    """

    def __init__(self, connection: Redis):
        """
        Initialize the registry.

        Args:
            connection: Redis connection shared by every queue.
        """
        self._connection = connection
        self._queues: dict[str, Queue] = {}
        self._lock = threading.Lock()
        self._metrics = get_metrics()

    @property
    def connection(self) -> Redis:
        return self._connection

    def __contains__(self, name: object) -> bool:
        return name in self._queues

    def __len__(self) -> int:
        return len(self._queues)

    def __iter__(self) -> Iterator[Queue]:
        return iter(list(self._queues.values()))

    def names(self) -> list[str]:
        """Names of the active queues, in activation order."""
        return list(self._queues)

    def create(self, name: str) -> Queue:
        """
        Activate a queue.

        Raises:
            QueueExistsError: If the queue is already active.
        """
        with self._lock:
            if name in self._queues:
                raise QueueExistsError(MSG_QUEUE_EXISTS)
            queue = Queue(name, connection=self._connection)
            self._queues[name] = queue
            active = len(self._queues)

        self._metrics.record_queue_created(active)
        logger.info("Queue activated", extra={"queue": name})
        return queue

    def get(self, name: str) -> Queue:
        """
        Get an active queue.

        Raises:
            QueueNotFoundError: If the queue is not active.
        """
        queue = self._queues.get(name)
        if queue is None:
            raise QueueNotFoundError(MSG_QUEUE_NOT_FOUND)
        return queue

    def remove(self, name: str) -> bool:
        """
        Deactivate a queue. Unknown names are ignored.

        Returns:
            True if the queue was active.
        """
        with self._lock:
            removed = self._queues.pop(name, None) is not None
            active = len(self._queues)

        if removed:
            self._metrics.record_queue_removed(active)
            logger.info("Queue deactivated", extra={"queue": name})
        return removed

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def add_job(
        self,
        queue_name: str,
        func: JobFunc,
        name: str,
        data: dict[str, Any],
        opts: JobOptions | None = None,
    ) -> Job:
        """
        Enqueue a job on an active queue.

        A positive ``delay`` schedules the job instead of queueing it; it
        becomes runnable once a worker's scheduler moves it onto the queue.

        Args:
            queue_name: Target queue.
            func: Job function; receives the values of ``data`` as keyword
                arguments.
            name: Job name shown on the dashboard.
            data: Job data.
            opts: Job options.

        Returns:
            The enqueued job.

        Raises:
            QueueNotFoundError: If the queue is not active.
        """
        queue = self.get(queue_name)
        opts = opts or JobOptions()

        kwargs = enqueue_options(opts)
        kwargs["description"] = name
        kwargs["meta"] = build_job_meta(name, data)

        with traced(SPAN_ENQUEUE_JOB, queue=queue_name, job_name=name, delay=opts.delay) as span:

            if opts.delay and opts.delay > 0:
                job = queue.enqueue_in(
                    timedelta(seconds=opts.delay),
                    func,
                    kwargs=data,
                    **kwargs,
                )
            else:
                job = queue.enqueue(func, kwargs=data, **kwargs)

            span.set_attribute("job_id", job.id)

        self._metrics.record_job_enqueued(queue=queue_name, name=name)
        logger.info(
            "Job enqueued",
            extra={
                "queue": queue_name,
                "job_id": job.id,
                "job_name": name,
                "delay": opts.delay,
            },
        )
        return job

    def summaries(self) -> list[QueueSummary]:
        """Job counts per state for every active queue."""
        return [
            QueueSummary(name=queue.name, counts=self._counts(queue))
            for queue in self
        ]

    def summary(self, queue_name: str) -> QueueSummary:
        """Job counts per state for one queue."""
        queue = self.get(queue_name)
        return QueueSummary(name=queue.name, counts=self._counts(queue))

    def list_jobs(
        self,
        queue_name: str,
        state: JobState,
        start: int = 0,
        length: int = 25,
    ) -> list[JobSummary]:
        """
        List jobs of one state.

        Jobs that expired between reading the ids and fetching them are
        skipped.
        """
        queue = self.get(queue_name)
        job_ids = self._job_ids(queue, state, start, length)
        jobs = Job.fetch_many(job_ids, connection=self._connection)
        return [_to_summary(job) for job in jobs if job is not None]

    def get_job(self, queue_name: str, job_id: str) -> JobDetail:
        """
        Get job details.

        Raises:
            QueueNotFoundError: If the queue is not active.
            JobNotFoundError: If the job does not exist in the queue.
        """
        job = self._fetch(queue_name, job_id)
        return _to_detail(job)

    def retry_job(self, queue_name: str, job_id: str) -> None:
        """
        Requeue a failed job.

        Raises:
            JobStateError: If the job has not failed.
        """
        job = self._fetch(queue_name, job_id)
        status = job.get_status()
        if status != JobStatus.FAILED:
            raise JobStateError(f"job is not failed (current status: {status})")

        self.get(queue_name).failed_job_registry.requeue(job_id)
        logger.info("Job retried", extra={"queue": queue_name, "job_id": job_id})

    def remove_job(self, queue_name: str, job_id: str) -> None:
        """Delete a job and its registry entries."""
        job = self._fetch(queue_name, job_id)
        job.delete()
        logger.info("Job removed", extra={"queue": queue_name, "job_id": job_id})

    def clean(self, queue_name: str, state: JobState) -> int:
        """
        Delete every job in one state.

        Returns:
            Number of jobs deleted.
        """
        queue = self.get(queue_name)
        removed = 0

        if state == JobState.QUEUED:
            for job_id in queue.get_job_ids():
                queue.remove(job_id)
                _delete_job(job_id, self._connection)
                removed += 1
        else:
            registry = _registry_for(queue, state)
            for job_id in registry.get_job_ids():
                registry.remove(job_id)
                _delete_job(job_id, self._connection)
                removed += 1

        logger.info(
            "Queue cleaned",
            extra={"queue": queue_name, "state": state.value, "removed": removed},
        )
        return removed

    def _fetch(self, queue_name: str, job_id: str) -> Job:
        self.get(queue_name)
        try:
            job = Job.fetch(job_id, connection=self._connection)
        except NoSuchJobError:
            raise JobNotFoundError(f"job {job_id} not found") from None
        if job.origin != queue_name:
            raise JobNotFoundError(f"job {job_id} not found")
        return job

    def _counts(self, queue: Queue) -> dict[JobState, int]:
        counts = {JobState.QUEUED: queue.count}
        for state in JobState:
            if state != JobState.QUEUED:
                counts[state] = len(_registry_for(queue, state))
        return counts

    def _job_ids(self, queue: Queue, state: JobState, start: int, length: int) -> list[str]:
        if state == JobState.QUEUED:
            return queue.get_job_ids(offset=start, length=length)
        return _registry_for(queue, state).get_job_ids(start, start + length - 1)


def _registry_for(queue: Queue, state: JobState) -> BaseRegistry:
    registries = {
        JobState.STARTED: queue.started_job_registry,
        JobState.DEFERRED: queue.deferred_job_registry,
        JobState.SCHEDULED: queue.scheduled_job_registry,
        JobState.FINISHED: queue.finished_job_registry,
        JobState.FAILED: queue.failed_job_registry,
        JobState.CANCELED: queue.canceled_job_registry,
    }
    return registries[state]


def _delete_job(job_id: str, connection: Redis) -> None:
    try:
        Job.fetch(job_id, connection=connection).delete(remove_from_queue=False)
    except NoSuchJobError:
        pass


def _to_summary(job: Job) -> JobSummary:
    status = job.get_status(refresh=False)
    return JobSummary(
        id=job.id,
        queue=job.origin,
        name=job.meta.get("name") or job.description,
        data=job.meta.get("data") or {},
        status=status.value if status is not None else None,
        progress=job.meta.get("progress", 0),
        created_at=job.created_at,
        enqueued_at=job.enqueued_at,
        started_at=job.started_at,
        ended_at=job.ended_at,
    )


def _to_detail(job: Job) -> JobDetail:
    summary = _to_summary(job)
    result = job.latest_result()

    return_value = None
    failure = None
    if result is not None:
        if result.type == Result.Type.SUCCESSFUL:
            return_value = result.return_value
        else:
            failure = result.exc_string

    return JobDetail(
        **summary.model_dump(),
        description=job.description,
        options={
            "timeout": job.timeout,
            "result_ttl": job.result_ttl,
            "failure_ttl": job.failure_ttl,
            "retry_intervals": job.retry_intervals,
        },
        logs=list(job.meta.get("logs", [])),
        retries_left=job.retries_left,
        return_value=return_value,
        failure=failure,
    )
