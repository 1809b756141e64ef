"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)

from jobboard.constants import (
    METRIC_ACTIVE_QUEUES,
    METRIC_JOBS_ENQUEUED,
    METRIC_LOGIN_ATTEMPTS,
    METRIC_QUEUE_JOBS,
    METRIC_QUEUES_CREATED,
    METRIC_QUEUES_REMOVED,
    METRIC_WORKERS_RUNNING,
    METRIC_WORKERS_SPAWNED,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for the job board.

    Collects metrics for:
    - Jobs enqueued through the API
    - Queue activation and removal
    - Jobs per queue and state, sampled when the dashboard is read
    - Worker processes
    - Dashboard login attempts
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.jobs_enqueued = Counter(
            METRIC_JOBS_ENQUEUED,
            "Total number of jobs enqueued",
            ["queue", "name"],
            registry=self._registry,
        )

        self.queues_created = Counter(
            METRIC_QUEUES_CREATED,
            "Total number of queues activated",
            registry=self._registry,
        )

        self.queues_removed = Counter(
            METRIC_QUEUES_REMOVED,
            "Total number of queues deactivated",
            registry=self._registry,
        )

        self.active_queues = Gauge(
            METRIC_ACTIVE_QUEUES,
            "Number of active queues",
            registry=self._registry,
        )

        self.queue_jobs = Gauge(
            METRIC_QUEUE_JOBS,
            "Number of jobs in a queue by state",
            ["queue", "state"],
            registry=self._registry,
        )

        self.workers_spawned = Counter(
            METRIC_WORKERS_SPAWNED,
            "Total number of worker processes spawned",
            ["queue"],
            registry=self._registry,
        )

        self.workers_running = Gauge(
            METRIC_WORKERS_RUNNING,
            "Number of running worker processes",
            registry=self._registry,
        )

        self.login_attempts = Counter(
            METRIC_LOGIN_ATTEMPTS,
            "Dashboard login attempts",
            ["outcome"],
            registry=self._registry,
        )

    def record_job_enqueued(self, queue: str, name: str) -> None:
        """Record a job enqueue."""
        self.jobs_enqueued.labels(queue=queue, name=name).inc()

    def record_queue_created(self, active: int) -> None:
        """Record a queue activation."""
        self.queues_created.inc()
        self.active_queues.set(active)

    def record_queue_removed(self, active: int) -> None:
        """Record a queue deactivation."""
        self.queues_removed.inc()
        self.active_queues.set(active)

    def update_queue_jobs(self, queue: str, counts: dict[str, int]) -> None:
        """Update job counts for a queue."""
        for state, count in counts.items():
            self.queue_jobs.labels(queue=queue, state=state).set(count)

    def record_worker_spawned(self, queues: list[str], running: int) -> None:
        """Record a worker process spawn."""
        for queue in queues:
            self.workers_spawned.labels(queue=queue).inc()
        self.workers_running.set(running)

    def update_workers_running(self, running: int) -> None:
        """Update the running worker gauge."""
        self.workers_running.set(running)

    def record_login(self, success: bool) -> None:
        """Record a dashboard login attempt."""
        self.login_attempts.labels(outcome="success" if success else "failure").inc()

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """Get the metrics collector instance, creating it on first use."""
    if _metrics is None:
        return setup_metrics()
    return _metrics
