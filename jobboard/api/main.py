"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from jobboard import __version__
from jobboard.api.auth import LoginRequired
from jobboard.api.routes import (
    auth_router,
    dashboard_router,
    health_router,
    jobs_router,
    queues_router,
)
from jobboard.config import get_settings
from jobboard.constants import UI_BASE_PATH, UI_LOGIN_PATH
from jobboard.observability.logging import setup_logging
from jobboard.observability.metrics import setup_metrics
from jobboard.observability.tracing import instrument_fastapi, setup_tracing
from jobboard.queue import (
    QueueRegistryError,
    close_queues,
    close_redis,
    init_queues,
    init_redis,
)
from jobboard.worker import get_worker_pool

logger = logging.getLogger(__name__)


def log_startup_banner() -> None:
    """Log where the dashboard lives and how to feed the queues."""
    settings = get_settings()
    port = settings.api_port
    queue = settings.default_queues[0] if settings.default_queues else "<queue>"

    logger.info(f"Running on {port}...")
    logger.info(f"For the UI, open http://localhost:{port}{UI_BASE_PATH}")
    logger.info(f"Make sure Redis is running on {settings.redis_host}:{settings.redis_port}")
    logger.info("To populate the queue, run:")
    logger.info(
        f"  curl -X POST http://localhost:{port}/jobs -H 'Content-Type: application/json' "
        f"-d '{{\"title\": \"Example\", \"queueName\": \"{queue}\"}}'"
    )
    logger.info("To populate the queue with custom options (opts), run:")
    logger.info(
        f"  curl -X POST http://localhost:{port}/jobs -H 'Content-Type: application/json' "
        f"-d '{{\"title\": \"Test\", \"queueName\": \"{queue}\", \"opts\": {{\"delay\": 9}}}}'"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Connects Redis, activates the default queues and starts the default
    worker; on shutdown stops worker processes and closes Redis.
    """
    settings = get_settings()

    # Startup
    setup_logging()
    setup_metrics()
    setup_tracing()
    init_redis()
    init_queues(settings.default_queues)

    pool = get_worker_pool()
    if settings.start_default_worker and settings.default_queues:
        pool.spawn([settings.default_queues[0]])

    log_startup_banner()

    yield

    # Shutdown
    pool.stop_all()
    close_queues()
    close_redis()
    logger.info("Application shutdown")


async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    """Send visitors without a session to the login page."""
    return RedirectResponse(UI_LOGIN_PATH, status_code=status.HTTP_302_FOUND)


async def queue_registry_error_handler(
    request: Request,
    exc: QueueRegistryError,
) -> JSONResponse:
    """Render queue and job lookup errors in the control API envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "message": exc.message},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application instance.
    """
    app = FastAPI(
        title="Job Board",
        description="Login-gated dashboard and control API for Redis-backed RQ queues",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(QueueRegistryError, queue_registry_error_handler)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(jobs_router)
    app.include_router(queues_router)

    # Instrument with OpenTelemetry
    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    app = create_app()

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    run()
