"""Session resolution for protected routes and the page routing guard."""

import logging
from typing import Awaitable, Callable

from fastapi import Depends, Request, Response
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .errors import AuthenticationRequiredError, ConfigurationError, StoreError
from .models.auth import AuthUser
from .services.supabase import SupabaseClient, SupabaseError, get_supabase_client

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def session_token(request: Request, credentials: HTTPAuthorizationCredentials | None = None) -> str | None:
    """Access token from the Authorization header, else from the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_token_cookie) or None


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    supabase: SupabaseClient = Depends(get_supabase_client),
) -> AuthUser:
    """FastAPI dependency: the signed-in user, or 401."""
    token = session_token(request, credentials)
    if not token:
        raise AuthenticationRequiredError("Sign in to access your tasks.")

    try:
        user = await supabase.get_user(token)
    except SupabaseError as e:
        raise StoreError(f"Could not verify session: {e.message}") from e

    if user is None:
        raise AuthenticationRequiredError("Session is invalid or expired. Please sign in again.")
    return user


def _is_auth_page(path: str) -> bool:
    return any(path.startswith(prefix) for prefix in settings.auth_paths)


def _is_protected_page(path: str) -> bool:
    return path in settings.protected_paths


async def _guard_user(request: Request) -> AuthUser | None:
    """Resolve the session for the guard. Failures count as signed out."""
    token = session_token(request)
    if not token:
        return None
    try:
        return await get_supabase_client().get_user(token)
    except ConfigurationError as e:
        logger.error(f"Routing guard cannot check sessions: {e.details}")
    except SupabaseError as e:
        logger.warning(f"Routing guard session check failed: {e.message}")
    return None


async def auth_guard(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Redirect signed-out visitors away from the app and signed-in ones away from login.

    Only page paths are checked; API routes authenticate through get_current_user.
    """
    path = request.url.path
    protected = _is_protected_page(path)
    auth_page = _is_auth_page(path)

    if protected or auth_page:
        user = await _guard_user(request)
        if user is None and protected:
            logger.info(f"Redirecting signed-out request for {path} to {settings.login_path}")
            return RedirectResponse(settings.login_path, status_code=307)
        if user is not None and auth_page:
            return RedirectResponse(settings.home_path, status_code=307)

    return await call_next(request)
