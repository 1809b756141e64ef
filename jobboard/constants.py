"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class JobState(StrEnum):
    """
    Job states as shown on the dashboard.

    Each state maps onto the RQ queue or registry that holds the job:
    - QUEUED: the queue itself
    - STARTED: StartedJobRegistry
    - DEFERRED: DeferredJobRegistry (waiting on dependencies)
    - SCHEDULED: ScheduledJobRegistry (delayed jobs)
    - FINISHED: FinishedJobRegistry
    - FAILED: FailedJobRegistry
    - CANCELED: CanceledJobRegistry
    """

    QUEUED = "queued"
    STARTED = "started"
    DEFERRED = "deferred"
    SCHEDULED = "scheduled"
    FINISHED = "finished"
    FAILED = "failed"
    CANCELED = "canceled"


# Job names shown on the dashboard
JOB_NAME_ADD = "Add"
JOB_NAME_ERROR = "Error"

ERROR_JOB_TITLE = "some error"
ERROR_FORWARD_TITLE = "error demo test"

# Dashboard paths
UI_BASE_PATH = "/ui"
UI_LOGIN_PATH = f"{UI_BASE_PATH}/login"
DASHBOARD_USER = "bull-board"

# Error messages returned by the control API
MSG_QUEUE_NOT_FOUND = "queue not found"
MSG_QUEUE_EXISTS = "queue already existed."

# Upper bound for job delays and retry backoff (one year)
MAX_JOB_DELAY_SECONDS = 365 * 24 * 60 * 60

# Metrics names
METRIC_JOBS_ENQUEUED = "jobboard_jobs_enqueued_total"
METRIC_QUEUES_CREATED = "jobboard_queues_created_total"
METRIC_QUEUES_REMOVED = "jobboard_queues_removed_total"
METRIC_ACTIVE_QUEUES = "jobboard_active_queues"
METRIC_QUEUE_JOBS = "jobboard_queue_jobs"
METRIC_WORKERS_SPAWNED = "jobboard_workers_spawned_total"
METRIC_WORKERS_RUNNING = "jobboard_workers_running"
METRIC_LOGIN_ATTEMPTS = "jobboard_login_attempts_total"

# Trace span names
SPAN_ENQUEUE_JOB = "enqueue_job"
SPAN_SPAWN_WORKER = "spawn_worker"
