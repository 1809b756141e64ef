"""
API request and response type definitions.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jobboard.constants import JobState
from jobboard.types.job import JobOptions


class AddJobRequest(BaseModel):
    """Request body for adding a job to an active queue."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None, description="Title stored in the job data")
    queue_name: str = Field(..., alias="queueName", description="Target queue")
    opts: JobOptions = Field(default_factory=JobOptions)


class AddErrorJobRequest(BaseModel):
    """Request body for adding a job to the error queue."""

    opts: JobOptions = Field(default_factory=JobOptions)


class QueueRequest(BaseModel):
    """Request body naming a queue."""

    model_config = ConfigDict(populate_by_name=True)

    # Queue names appear in dashboard URL paths
    queue_name: str = Field(..., alias="queueName", min_length=1, pattern=r"^[^/]+$")


class OkResponse(BaseModel):
    """Result envelope used by the control API."""

    ok: bool = True
    message: str | None = None


class AddJobResponse(OkResponse):
    """Response after adding a job."""

    job_id: str = Field(..., serialization_alias="jobId")


class WorkerInfo(BaseModel):
    """A worker process started by the server."""

    name: str
    queues: list[str]
    pid: int | None
    alive: bool
    started_at: datetime


class WorkerResponse(OkResponse):
    """Response after spawning a worker."""

    worker: WorkerInfo


class WorkerListResponse(BaseModel):
    """Running worker processes."""

    workers: list[WorkerInfo]


class QueueInfo(BaseModel):
    """An active queue and its job counts."""

    name: str
    counts: dict[JobState, int]


class QueueListResponse(BaseModel):
    """All active queues."""

    queues: list[QueueInfo]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    redis: str
    timestamp: datetime
