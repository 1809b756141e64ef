"""
Pytest configuration and shared fixtures.
"""

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any

# Configure the application BEFORE any imports that read settings
os.environ["LOG_FORMAT"] = "console"
os.environ["START_DEFAULT_WORKER"] = "false"
os.environ["EXAMPLE_JOB_STEPS"] = "5"
os.environ["EXAMPLE_JOB_MAX_STEP_SECONDS"] = "0"
os.environ["EXAMPLE_JOB_ERROR_RATE"] = "0"
os.environ["API_SECRET_KEY"] = "test-secret-key"

import fakeredis
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from jobboard.api.auth import create_access_token
from jobboard.api.main import create_app
from jobboard.config import get_settings
from jobboard.constants import DASHBOARD_USER
from jobboard.queue import QueueRegistry, close_queues, close_redis, init_queues, init_redis
from jobboard.worker import WorkerPool, set_worker_pool

EXAMPLE_QUEUE = "ExampleBullMQ"
ERROR_QUEUE = "ErrorExampleBullMQ"


class FakeProcess:
    """Stand-in for a multiprocessing process; never forks."""

    _next_pid = 1000

    def __init__(self, target=None, args=(), kwargs=None, name=None, daemon=None):
        self.target = target
        self.args = args
        self.kwargs = kwargs or {}
        self.name = name
        self.daemon = daemon
        self.pid: int | None = None
        self.exitcode: int | None = None
        self.terminated = False
        self.killed = False
        self.ignore_terminate = False
        self._alive = False

    def start(self) -> None:
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self._alive = True

    def is_alive(self) -> bool:
        return self._alive

    def terminate(self) -> None:
        self.terminated = True
        if not self.ignore_terminate:
            self._exit(-15)

    def kill(self) -> None:
        self.killed = True
        self._exit(-9)

    def join(self, timeout: float | None = None) -> None:
        return None

    def _exit(self, code: int) -> None:
        self._alive = False
        self.exitcode = code


class FakeContext:
    """Multiprocessing context that hands out FakeProcess objects."""

    def __init__(self):
        self.processes: list[FakeProcess] = []

    def Process(self, **kwargs: Any) -> FakeProcess:
        process = FakeProcess(**kwargs)
        self.processes.append(process)
        return process


@pytest.fixture
def redis_conn() -> Generator[fakeredis.FakeRedis]:
    """In-memory Redis shared by the registry and the jobs under test."""
    connection = fakeredis.FakeRedis()
    yield connection
    connection.flushall()


@pytest.fixture
def registry(redis_conn: fakeredis.FakeRedis) -> Generator[QueueRegistry]:
    """Queue registry with the default queues active."""
    init_redis(redis_conn)
    registry = init_queues([EXAMPLE_QUEUE, ERROR_QUEUE])

    yield registry

    close_queues()
    close_redis()


@pytest.fixture
def process_context() -> FakeContext:
    return FakeContext()


@pytest.fixture
def worker_pool(process_context: FakeContext) -> Generator[WorkerPool]:
    """Worker pool that records spawned processes instead of starting them."""
    pool = WorkerPool(context=process_context, shutdown_timeout=0.1)
    set_worker_pool(pool)

    yield pool

    set_worker_pool(None)


@pytest.fixture
def app(registry: QueueRegistry, worker_pool: WorkerPool) -> FastAPI:
    """
    Create a FastAPI app for testing.

    ASGITransport does not run the lifespan, so Redis, queues and the
    worker pool are installed by the fixtures above.
    """
    return create_app()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def session_cookies() -> dict[str, str]:
    """Cookies of a logged-in dashboard session."""
    token = create_access_token(user=DASHBOARD_USER)
    return {get_settings().auth_cookie_name: token}


@pytest_asyncio.fixture
async def dashboard_client(
    app: FastAPI,
    session_cookies: dict[str, str],
) -> AsyncGenerator[AsyncClient]:
    """HTTP client carrying a dashboard session."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies=session_cookies,
    ) as client:
        yield client
