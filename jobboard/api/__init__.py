"""
API module.
Contains FastAPI application, routes, and dashboard authentication.
"""

from jobboard.api.main import create_app, run

__all__ = ["create_app", "run"]
