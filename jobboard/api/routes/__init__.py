"""
API routes module.
"""

from jobboard.api.routes.auth import router as auth_router
from jobboard.api.routes.dashboard import router as dashboard_router
from jobboard.api.routes.health import router as health_router
from jobboard.api.routes.jobs import router as jobs_router
from jobboard.api.routes.queues import router as queues_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "health_router",
    "jobs_router",
    "queues_router",
]
