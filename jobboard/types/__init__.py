"""
Type definitions for the job board.
Contains input/output type definitions, grouped by module.
"""

from jobboard.types.api import (
    AddErrorJobRequest,
    AddJobRequest,
    AddJobResponse,
    HealthResponse,
    OkResponse,
    QueueInfo,
    QueueListResponse,
    QueueRequest,
    WorkerInfo,
    WorkerListResponse,
    WorkerResponse,
)
from jobboard.types.job import (
    JobDetail,
    JobOptions,
    JobSummary,
    QueueSummary,
)

__all__ = [
    # API types
    "AddJobRequest",
    "AddJobResponse",
    "AddErrorJobRequest",
    "QueueRequest",
    "QueueInfo",
    "QueueListResponse",
    "OkResponse",
    "WorkerInfo",
    "WorkerResponse",
    "WorkerListResponse",
    "HealthResponse",
    # Job types
    "JobOptions",
    "JobSummary",
    "JobDetail",
    "QueueSummary",
]
