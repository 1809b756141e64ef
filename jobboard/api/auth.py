"""
Authentication for the dashboard.

A single configured user logs in through a form; the session is a JWT kept
in an httpOnly cookie.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from pydantic import BaseModel

from jobboard.config import get_settings
from jobboard.constants import DASHBOARD_USER


class LoginRequired(Exception):
    """Raised when a dashboard page is requested without a valid session."""


class TokenData(BaseModel):
    """Data extracted from JWT token."""

    user: str
    exp: datetime


class DashboardUser(BaseModel):
    """Authenticated dashboard user."""

    user: str


def authenticate(username: str, password: str) -> DashboardUser | None:
    """
    Check dashboard credentials.

    Args:
        username: Submitted username.
        password: Submitted password.

    Returns:
        The dashboard user, or None if the credentials do not match.
    """
    settings = get_settings()

    username_ok = secrets.compare_digest(
        username.encode(), settings.dashboard_username.encode()
    )
    password_ok = secrets.compare_digest(
        password.encode(), settings.dashboard_password.encode()
    )
    if username_ok and password_ok:
        return DashboardUser(user=DASHBOARD_USER)
    return None


def create_access_token(
    user: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user: The user identifier.
        expires_delta: Optional custom expiration time.

    Returns:
        The encoded JWT token.
    """
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.api_access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": user,
        "exp": now + expires_delta,
        "iat": now,
    }

    return jwt.encode(
        to_encode,
        settings.api_secret_key,
        algorithm=settings.api_algorithm,
    )


def decode_token(token: str) -> TokenData:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT token to decode.

    Returns:
        TokenData extracted from the token.

    Raises:
        HTTPException: If token is invalid or expired.
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.api_secret_key,
            algorithms=[settings.api_algorithm],
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    user = payload.get("sub")
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject",
        )

    return TokenData(
        user=user,
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


async def require_login(request: Request) -> DashboardUser:
    """
    FastAPI dependency guarding dashboard pages.

    Raises:
        LoginRequired: If the session cookie is missing or invalid. The
            application turns this into a redirect to the login page.
    """
    token = request.cookies.get(get_settings().auth_cookie_name)
    if not token:
        raise LoginRequired()

    try:
        token_data = decode_token(token)
    except HTTPException:
        raise LoginRequired() from None

    return DashboardUser(user=token_data.user)


# Type alias for dependency injection
CurrentUser = Annotated[DashboardUser, Depends(require_login)]
