"""
Job-related type definitions.
"""

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobboard.constants import MAX_JOB_DELAY_SECONDS, JobState


class JobOptions(BaseModel):
    """
    Options accepted when adding a job.

    Field aliases follow the camelCase names clients of the control API
    send (``jobId``, ``removeOnComplete``); snake_case is accepted too.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    delay: float | None = Field(
        default=None,
        le=MAX_JOB_DELAY_SECONDS,
        allow_inf_nan=False,
        description="Seconds to wait before the job becomes runnable",
    )
    attempts: int | None = Field(
        default=None, ge=1, description="Total attempts including the first run"
    )
    backoff: int | None = Field(
        default=None,
        ge=0,
        le=MAX_JOB_DELAY_SECONDS,
        description="Seconds between retry attempts",
    )
    lifo: bool = Field(default=False, description="Put the job at the front of the queue")
    job_id: str | None = Field(default=None, alias="jobId", min_length=1)
    timeout: int | None = Field(default=None, gt=0, description="Job timeout in seconds")
    remove_on_complete: bool = Field(default=False, alias="removeOnComplete")
    remove_on_fail: bool = Field(default=False, alias="removeOnFail")

    @field_validator("delay", mode="before")
    @classmethod
    def _coerce_delay(cls, value: Any) -> Any:
        # Form-style clients send the delay as a string
        if isinstance(value, str):
            if not value.strip():
                return None
            value = float(value)
            if not math.isfinite(value):
                raise ValueError("delay must be a finite number of seconds")
        return value


class QueueSummary(BaseModel):
    """Job counts per state for one queue."""

    name: str
    counts: dict[JobState, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class JobSummary(BaseModel):
    """A job as listed on the dashboard."""

    id: str
    queue: str
    name: str | None = None
    data: dict[str, Any] = {}
    status: str | None = None
    progress: int = 0
    created_at: datetime | None = None
    enqueued_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None


class JobDetail(JobSummary):
    """Full job details including logs and outcome."""

    description: str | None = None
    options: dict[str, Any] = {}
    logs: list[str] = []
    retries_left: int | None = None
    return_value: Any = None
    failure: str | None = None
