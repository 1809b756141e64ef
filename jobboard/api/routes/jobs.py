"""
Job submission routes.
"""

from fastapi import APIRouter, Depends

from jobboard.config import get_settings
from jobboard.constants import ERROR_JOB_TITLE, JOB_NAME_ADD, JOB_NAME_ERROR
from jobboard.queue import QueueRegistry, get_queue_registry
from jobboard.queue.jobs import process_error_job, process_example_job
from jobboard.types.api import AddErrorJobRequest, AddJobRequest, AddJobResponse

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post(
    "",
    response_model=AddJobResponse,
    response_model_exclude_none=True,
    summary="Add a job",
    description="Add an example job to an active queue.",
    responses={404: {"description": "Queue not found"}},
)
def add_job(
    request: AddJobRequest,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> AddJobResponse:
    """
    Add an ``Add`` job to an active queue.

    Args:
        request: Title, target queue and job options.
        registry: Active queues.

    Returns:
        AddJobResponse with the new job id.
    """
    job = registry.add_job(
        request.queue_name,
        process_example_job,
        JOB_NAME_ADD,
        {"title": request.title},
        request.opts,
    )
    return AddJobResponse(job_id=job.id)


@router.post(
    "/error",
    response_model=AddJobResponse,
    response_model_exclude_none=True,
    summary="Add an error job",
    description="Add a job that always fails to the error queue.",
)
def add_error_job(
    request: AddErrorJobRequest = AddErrorJobRequest(),
    registry: QueueRegistry = Depends(get_queue_registry),
) -> AddJobResponse:
    job = registry.add_job(
        get_settings().error_queue_name,
        process_error_job,
        JOB_NAME_ERROR,
        {"title": ERROR_JOB_TITLE},
        request.opts,
    )
    return AddJobResponse(job_id=job.id)
