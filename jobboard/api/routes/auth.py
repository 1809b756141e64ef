"""
Dashboard login routes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from jobboard.api.auth import authenticate, create_access_token
from jobboard.api.templating import templates
from jobboard.config import get_settings
from jobboard.constants import UI_BASE_PATH, UI_LOGIN_PATH
from jobboard.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix=UI_BASE_PATH, tags=["Authentication"])


@router.get(
    "/login",
    response_class=HTMLResponse,
    summary="Login page",
)
async def login_page(request: Request, invalid: bool = False) -> HTMLResponse:
    """Render the login form, with an error notice after a failed attempt."""
    return templates.TemplateResponse(request, "login.html", {"invalid": invalid})


@router.post(
    "/login",
    summary="Log in",
    description="Check the dashboard credentials and start a session.",
)
async def login(
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> RedirectResponse:
    """
    Log in to the dashboard.

    Missing or wrong credentials redirect back to the login form with
    ``invalid=true``; success sets the session cookie and redirects to the
    dashboard.
    """
    settings = get_settings()
    user = authenticate(username, password)
    get_metrics().record_login(success=user is not None)

    if user is None:
        logger.warning("Dashboard login failed", extra={"username": username})
        return RedirectResponse(
            f"{UI_LOGIN_PATH}?invalid=true",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    response = RedirectResponse(UI_BASE_PATH, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=create_access_token(user=user.user),
        max_age=settings.api_access_token_expire_minutes * 60,
        path=UI_BASE_PATH,
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
    )

    logger.info("Dashboard login", extra={"user": user.user})
    return response


@router.post("/logout", summary="Log out")
async def logout() -> RedirectResponse:
    """End the dashboard session."""
    response = RedirectResponse(UI_LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(get_settings().auth_cookie_name, path=UI_BASE_PATH)
    return response
