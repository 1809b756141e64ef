"""
Queue and worker management routes.
"""

from fastapi import APIRouter, Depends, status

from jobboard.queue import QueueRegistry, get_queue_registry
from jobboard.types.api import (
    OkResponse,
    QueueInfo,
    QueueListResponse,
    QueueRequest,
    WorkerListResponse,
    WorkerResponse,
)
from jobboard.worker import WorkerPool, get_worker_pool

router = APIRouter(tags=["Queues"])


@router.get(
    "/queues",
    response_model=QueueListResponse,
    summary="List queues",
    description="List active queues with their job counts.",
)
def list_queues(
    registry: QueueRegistry = Depends(get_queue_registry),
) -> QueueListResponse:
    return QueueListResponse(
        queues=[
            QueueInfo(name=summary.name, counts=summary.counts)
            for summary in registry.summaries()
        ]
    )


@router.post(
    "/queues",
    response_model=OkResponse,
    response_model_exclude_none=True,
    summary="Create a queue",
    description="Activate a queue and show it on the dashboard.",
    responses={400: {"description": "Queue already active"}},
)
def create_queue(
    request: QueueRequest,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> OkResponse:
    registry.create(request.queue_name)
    return OkResponse()


@router.delete(
    "/queues",
    response_model=OkResponse,
    response_model_exclude_none=True,
    summary="Remove a queue",
    description="Deactivate a queue. Jobs stay in Redis; unknown queues are ignored.",
)
def remove_queue(
    request: QueueRequest,
    registry: QueueRegistry = Depends(get_queue_registry),
) -> OkResponse:
    registry.remove(request.queue_name)
    return OkResponse()


@router.post(
    "/worker",
    response_model=WorkerResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Start a worker",
    description="Spawn a worker process consuming an active queue.",
    responses={404: {"description": "Queue not found"}},
)
def spawn_worker(
    request: QueueRequest,
    registry: QueueRegistry = Depends(get_queue_registry),
    pool: WorkerPool = Depends(get_worker_pool),
) -> WorkerResponse:
    """
    Spawn a worker for an active queue.

    Args:
        request: The queue to consume.
        registry: Active queues.
        pool: Worker processes.

    Returns:
        WorkerResponse describing the new process.
    """
    queue = registry.get(request.queue_name)
    worker = pool.spawn([queue.name])
    return WorkerResponse(worker=worker.to_info())


@router.get(
    "/workers",
    response_model=WorkerListResponse,
    summary="List workers",
    description="List worker processes started by this server.",
)
def list_workers(
    pool: WorkerPool = Depends(get_worker_pool),
) -> WorkerListResponse:
    return WorkerListResponse(workers=[worker.to_info() for worker in pool.running()])
