"""
Worker processes spawned by the API server.
"""

import logging
import multiprocessing
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from multiprocessing.context import BaseContext
from multiprocessing.process import BaseProcess
from uuid import uuid4

from jobboard.config import get_settings
from jobboard.constants import SPAN_SPAWN_WORKER
from jobboard.observability.metrics import get_metrics
from jobboard.observability.tracing import traced
from jobboard.types.api import WorkerInfo
from jobboard.worker.main import run_worker_process

logger = logging.getLogger(__name__)


@dataclass
class WorkerProcess:
    """A worker process and the queues it consumes."""

    name: str
    queues: list[str]
    process: BaseProcess
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def pid(self) -> int | None:
        return self.process.pid

    @property
    def is_alive(self) -> bool:
        return self.process.is_alive()

    def to_info(self) -> WorkerInfo:
        return WorkerInfo(
            name=self.name,
            queues=self.queues,
            pid=self.pid,
            alive=self.is_alive,
            started_at=self.started_at,
        )


class WorkerPool:
    """
    Spawns and supervises worker processes.

    Processes are started with the ``spawn`` start method so they do not
    inherit the server's event loop or threads. They are not daemonic: the
    RQ worker starts its scheduler as a child process, which daemonic
    processes may not do. ``stop_all`` reaps them on shutdown.
    """

    def __init__(
        self,
        context: BaseContext | None = None,
        shutdown_timeout: float | None = None,
        target: Callable[..., None] = run_worker_process,
    ):
        """
        Initialize the pool.

        Args:
            context: Multiprocessing context used to create processes.
            shutdown_timeout: Seconds to wait for a worker to exit after
                SIGTERM before killing it.
            target: Process entrypoint, called with the queue names and
                a ``name`` keyword.
        """
        settings = get_settings()

        self._context = context or multiprocessing.get_context("spawn")
        self._shutdown_timeout = (
            shutdown_timeout
            if shutdown_timeout is not None
            else settings.worker_shutdown_timeout_seconds
        )
        self._target = target
        self._workers: dict[str, WorkerProcess] = {}
        self._lock = threading.Lock()
        self._metrics = get_metrics()

    def __len__(self) -> int:
        return len(self.running())

    def spawn(self, queue_names: list[str]) -> WorkerProcess:
        """
        Start a worker process consuming the given queues.

        Args:
            queue_names: Queues to consume, in priority order.

        Returns:
            The started worker.
        """
        name = f"jobboard-worker-{uuid4().hex[:8]}"

        with traced(SPAN_SPAWN_WORKER, worker=name, queues=",".join(queue_names)):
            process = self._context.Process(
                target=self._target,
                args=(list(queue_names),),
                kwargs={"name": name},
                name=name,
            )
            process.start()

        worker = WorkerProcess(name=name, queues=list(queue_names), process=process)

        with self._lock:
            self._workers[name] = worker
            running = len(self._workers)

        self._metrics.record_worker_spawned(worker.queues, running)
        logger.info(
            "Worker process spawned",
            extra={"worker": name, "pid": worker.pid, "queues": worker.queues},
        )
        return worker

    def running(self) -> list[WorkerProcess]:
        """Running workers. Exited processes are dropped."""
        with self._lock:
            for name, worker in list(self._workers.items()):
                if not worker.is_alive:
                    logger.warning(
                        "Worker process exited",
                        extra={"worker": name, "exitcode": worker.process.exitcode},
                    )
                    del self._workers[name]
            workers = list(self._workers.values())

        self._metrics.update_workers_running(len(workers))
        return workers

    def stop_all(self) -> None:
        """
        Stop every worker.

        Sends SIGTERM so RQ finishes the current job, then kills workers
        still running after the shutdown timeout.
        """
        with self._lock:
            workers = list(self._workers.values())
            self._workers.clear()

        for worker in workers:
            if worker.is_alive:
                worker.process.terminate()

        for worker in workers:
            worker.process.join(self._shutdown_timeout)
            if worker.is_alive:
                logger.warning(
                    "Worker did not stop in time, killing",
                    extra={"worker": worker.name, "pid": worker.pid},
                )
                worker.process.kill()
                worker.process.join()

        self._metrics.update_workers_running(0)
        if workers:
            logger.info("Worker processes stopped", extra={"count": len(workers)})
