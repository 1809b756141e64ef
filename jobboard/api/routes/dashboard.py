"""
Dashboard routes.

HTML pages and their JSON counterparts for browsing queues and jobs. Every
route requires a dashboard session.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from jobboard.api.auth import CurrentUser
from jobboard.api.templating import templates
from jobboard.config import get_settings
from jobboard.constants import UI_BASE_PATH, JobState
from jobboard.observability.metrics import get_metrics
from jobboard.queue import QueueRegistry, get_queue_registry
from jobboard.types.api import QueueInfo, QueueListResponse
from jobboard.types.job import JobDetail, JobSummary
from jobboard.worker import WorkerPool, get_worker_pool

router = APIRouter(prefix=UI_BASE_PATH, tags=["Dashboard"])


def _queue_url(queue_name: str, state: JobState | None = None) -> str:
    url = f"{UI_BASE_PATH}/queues/{quote(queue_name, safe='')}"
    if state is not None:
        url += f"?state={state.value}"
    return url


@router.get("", response_class=HTMLResponse, summary="Queue overview")
def overview(
    request: Request,
    user: CurrentUser,
    registry: QueueRegistry = Depends(get_queue_registry),
    pool: WorkerPool = Depends(get_worker_pool),
) -> HTMLResponse:
    """Render every active queue with its job counts and the running workers."""
    summaries = registry.summaries()

    metrics = get_metrics()
    for summary in summaries:
        metrics.update_queue_jobs(summary.name, summary.counts)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "user": user,
            "queues": summaries,
            "workers": pool.running(),
        },
    )


@router.get(
    "/queues/{queue_name}",
    response_class=HTMLResponse,
    summary="Jobs in a queue",
)
def queue_page(
    request: Request,
    queue_name: str,
    user: CurrentUser,
    state: JobState = Query(default=JobState.QUEUED),
    page: int = Query(default=1, ge=1),
    registry: QueueRegistry = Depends(get_queue_registry),
) -> HTMLResponse:
    """Render one page of jobs in the given state."""
    page_size = get_settings().dashboard_page_size
    summary = registry.summary(queue_name)
    jobs = registry.list_jobs(
        queue_name,
        state,
        start=(page - 1) * page_size,
        length=page_size,
    )

    return templates.TemplateResponse(
        request,
        "queue.html",
        {
            "user": user,
            "queue": summary,
            "state": state,
            "jobs": jobs,
            "page": page,
            "has_next": page * page_size < summary.counts[state],
        },
    )


@router.get(
    "/queues/{queue_name}/jobs/{job_id}",
    response_class=HTMLResponse,
    summary="Job details",
)
def job_page(
    request: Request,
    queue_name: str,
    job_id: str,
    user: CurrentUser,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> HTMLResponse:
    """Render a job's data, progress, logs and outcome."""
    job = registry.get_job(queue_name, job_id)
    return templates.TemplateResponse(
        request,
        "job.html",
        {"user": user, "queue_name": queue_name, "job": job},
    )


@router.post("/queues/{queue_name}/jobs/{job_id}/retry", summary="Retry a failed job")
def retry_job(
    queue_name: str,
    job_id: str,
    user: CurrentUser,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> RedirectResponse:
    registry.retry_job(queue_name, job_id)
    return RedirectResponse(
        _queue_url(queue_name, JobState.FAILED),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.post("/queues/{queue_name}/jobs/{job_id}/remove", summary="Remove a job")
def remove_job(
    queue_name: str,
    job_id: str,
    user: CurrentUser,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> RedirectResponse:
    registry.remove_job(queue_name, job_id)
    return RedirectResponse(_queue_url(queue_name), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/queues/{queue_name}/clean", summary="Remove all jobs in a state")
def clean_queue(
    queue_name: str,
    user: CurrentUser,
    state: JobState = Query(...),
    registry: QueueRegistry = Depends(get_queue_registry),
) -> RedirectResponse:
    registry.clean(queue_name, state)
    return RedirectResponse(
        _queue_url(queue_name, state),
        status_code=status.HTTP_303_SEE_OTHER,
    )


# ----------------------------------------------------------------------------
# JSON API
# ----------------------------------------------------------------------------


@router.get("/api/queues", response_model=QueueListResponse, summary="Queue summaries")
def api_queues(
    user: CurrentUser,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> QueueListResponse:
    return QueueListResponse(
        queues=[
            QueueInfo(name=summary.name, counts=summary.counts)
            for summary in registry.summaries()
        ]
    )


@router.get(
    "/api/queues/{queue_name}/jobs",
    response_model=list[JobSummary],
    summary="Jobs in a queue",
)
def api_jobs(
    queue_name: str,
    user: CurrentUser,
    state: JobState = Query(default=JobState.QUEUED),
    start: int = Query(default=0, ge=0),
    length: int = Query(default=25, ge=1, le=100),
    registry: QueueRegistry = Depends(get_queue_registry),
) -> list[JobSummary]:
    return registry.list_jobs(queue_name, state, start=start, length=length)


@router.get(
    "/api/queues/{queue_name}/jobs/{job_id}",
    response_model=JobDetail,
    summary="Job details",
)
def api_job(
    queue_name: str,
    job_id: str,
    user: CurrentUser,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> JobDetail:
    return registry.get_job(queue_name, job_id)
