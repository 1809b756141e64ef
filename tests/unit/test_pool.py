"""
Unit tests for the worker process pool.
"""

from jobboard.worker import WorkerPool
from jobboard.worker.main import run_worker_process


class TestWorkerPool:
    """Tests for spawning and stopping worker processes."""

    def test_spawn_starts_process(self, worker_pool: WorkerPool, process_context):
        worker = worker_pool.spawn(["ExampleBullMQ"])

        [process] = process_context.processes
        assert process.target is run_worker_process
        assert process.args == (["ExampleBullMQ"],)
        assert process.kwargs == {"name": worker.name}
        assert not process.daemon
        assert worker.pid == process.pid
        assert worker.is_alive is True
        assert worker.queues == ["ExampleBullMQ"]

    def test_worker_names_are_unique(self, worker_pool: WorkerPool):
        first = worker_pool.spawn(["ExampleBullMQ"])
        second = worker_pool.spawn(["ExampleBullMQ"])

        assert first.name != second.name
        assert len(worker_pool) == 2

    def test_running_drops_exited_processes(self, worker_pool: WorkerPool):
        alive = worker_pool.spawn(["ExampleBullMQ"])
        exited = worker_pool.spawn(["ErrorExampleBullMQ"])
        exited.process._exit(1)

        running = worker_pool.running()

        assert running == [alive]

    def test_to_info(self, worker_pool: WorkerPool):
        worker = worker_pool.spawn(["ExampleBullMQ"])

        info = worker.to_info()

        assert info.name == worker.name
        assert info.pid == worker.pid
        assert info.alive is True
        assert info.queues == ["ExampleBullMQ"]

    def test_stop_all_terminates(self, worker_pool: WorkerPool, process_context):
        worker_pool.spawn(["ExampleBullMQ"])
        worker_pool.spawn(["ErrorExampleBullMQ"])

        worker_pool.stop_all()

        assert all(process.terminated for process in process_context.processes)
        assert not any(process.killed for process in process_context.processes)
        assert worker_pool.running() == []

    def test_stop_all_kills_stragglers(self, worker_pool: WorkerPool, process_context):
        worker = worker_pool.spawn(["ExampleBullMQ"])
        worker.process.ignore_terminate = True

        worker_pool.stop_all()

        assert worker.process.terminated is True
        assert worker.process.killed is True
        assert worker.is_alive is False
