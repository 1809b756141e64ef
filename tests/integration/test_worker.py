"""
Integration tests for worker functionality.

Jobs are run by an in-process RQ SimpleWorker in burst mode against the
fake Redis used by the registry.
"""

import multiprocessing
import sys
from unittest.mock import MagicMock, patch

import pytest
from rq import SimpleWorker
from rq.job import Job, JobStatus

from jobboard.constants import ERROR_JOB_TITLE, JOB_NAME_ADD, JOB_NAME_ERROR
from jobboard.queue import QueueRegistry
from jobboard.queue.jobs import process_error_job, process_example_job
from jobboard.types.job import JobOptions
from jobboard.worker import WorkerPool
from jobboard.worker.main import run_worker_process

EXAMPLE_QUEUE = "ExampleBullMQ"
ERROR_QUEUE = "ErrorExampleBullMQ"


def _work(registry: QueueRegistry, *queue_names: str) -> None:
    queues = [registry.get(name) for name in queue_names]
    SimpleWorker(queues, connection=registry.connection).work(burst=True)


def _exit_cleanly() -> None:
    pass


def _start_child_process(queue_names: list[str], name: str | None = None) -> None:
    """Worker entrypoint stand-in that starts a child, as the RQ scheduler does."""
    child = multiprocessing.get_context("spawn").Process(target=_exit_cleanly)
    child.start()
    child.join(30)
    sys.exit(child.exitcode)


class TestWorkerIntegration:
    """Integration tests for worker job processing."""

    def test_example_job_lifecycle(self, registry: QueueRegistry):
        """Test complete job lifecycle: enqueue -> run -> finished."""
        job = registry.add_job(
            EXAMPLE_QUEUE,
            process_example_job,
            JOB_NAME_ADD,
            {"title": "Example"},
        )

        _work(registry, EXAMPLE_QUEUE)

        job = Job.fetch(job.id, connection=registry.connection)
        assert job.get_status() == JobStatus.FINISHED
        assert job.meta["progress"] == 100
        assert job.meta["logs"][0] == "Processing job at interval 0"

        detail = registry.get_job(EXAMPLE_QUEUE, job.id)
        assert detail.return_value == {
            "jobId": f"This is the return value of job ({job.id})"
        }
        assert detail.failure is None

        queue = registry.get(EXAMPLE_QUEUE)
        assert job.id in queue.finished_job_registry.get_job_ids()

    def test_error_job_fails(self, registry: QueueRegistry):
        job = registry.add_job(
            ERROR_QUEUE,
            process_error_job,
            JOB_NAME_ERROR,
            {"title": ERROR_JOB_TITLE},
        )

        _work(registry, ERROR_QUEUE)

        queue = registry.get(ERROR_QUEUE)
        assert job.id in queue.failed_job_registry.get_job_ids()

        detail = registry.get_job(ERROR_QUEUE, job.id)
        assert detail.status == JobStatus.FAILED.value
        assert "DemoJobError" in detail.failure
        assert detail.logs == [f"Processing error job: {ERROR_JOB_TITLE}"]

    def test_failed_job_can_be_retried(self, registry: QueueRegistry):
        job = registry.add_job(
            ERROR_QUEUE,
            process_error_job,
            JOB_NAME_ERROR,
            {"title": ERROR_JOB_TITLE},
        )
        _work(registry, ERROR_QUEUE)

        registry.retry_job(ERROR_QUEUE, job.id)

        queue = registry.get(ERROR_QUEUE)
        assert queue.get_job_ids() == [job.id]

        _work(registry, ERROR_QUEUE)
        assert job.id in queue.failed_job_registry.get_job_ids()

    def test_remove_on_complete(self, registry: QueueRegistry):
        job = registry.add_job(
            EXAMPLE_QUEUE,
            process_example_job,
            JOB_NAME_ADD,
            {"title": "Short lived"},
            JobOptions(removeOnComplete=True),
        )

        _work(registry, EXAMPLE_QUEUE)

        assert not Job.exists(job.id, connection=registry.connection)

    def test_worker_consumes_several_queues(self, registry: QueueRegistry):
        registry.add_job(
            EXAMPLE_QUEUE, process_example_job, JOB_NAME_ADD, {"title": "a"}
        )
        registry.add_job(
            ERROR_QUEUE, process_error_job, JOB_NAME_ERROR, {"title": "b"}
        )

        _work(registry, EXAMPLE_QUEUE, ERROR_QUEUE)

        summaries = {summary.name: summary for summary in registry.summaries()}
        assert summaries[EXAMPLE_QUEUE].counts["finished"] == 1
        assert summaries[ERROR_QUEUE].counts["failed"] == 1


class TestRunWorkerProcess:
    """Tests for the worker process entrypoint."""

    def test_runs_rq_worker_with_scheduler(self):
        connection = MagicMock()
        with (
            patch("jobboard.worker.main.setup_logging") as setup_logging,
            patch(
                "jobboard.worker.main.create_redis_connection",
                return_value=connection,
            ),
            patch("jobboard.worker.main.Worker") as worker_cls,
        ):
            run_worker_process([EXAMPLE_QUEUE], burst=True, name="worker-1")

        setup_logging.assert_called_once_with(process_name="worker-1")
        worker_cls.assert_called_once_with(
            [EXAMPLE_QUEUE],
            connection=connection,
            name="worker-1",
        )
        worker_cls.return_value.work.assert_called_once_with(
            with_scheduler=True,
            burst=True,
        )
        connection.close.assert_called_once()

    def test_closes_connection_on_error(self):
        connection = MagicMock()
        with (
            patch("jobboard.worker.main.setup_logging"),
            patch(
                "jobboard.worker.main.create_redis_connection",
                return_value=connection,
            ),
            patch("jobboard.worker.main.Worker") as worker_cls,
        ):
            worker_cls.return_value.work.side_effect = RuntimeError("redis down")

            with pytest.raises(RuntimeError, match="redis down"):
                run_worker_process([EXAMPLE_QUEUE])

        connection.close.assert_called_once()


class TestSpawnedWorkerProcess:
    """Tests for real processes started by the worker pool."""

    def test_worker_process_can_start_children(self):
        pool = WorkerPool(shutdown_timeout=5, target=_start_child_process)

        worker = pool.spawn([EXAMPLE_QUEUE])
        worker.process.join(60)

        assert worker.process.daemon is False
        assert worker.process.exitcode == 0

        pool.stop_all()
