"""Email confirmation / OAuth callback."""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from ..config import settings
from ..services.supabase import SupabaseClient, SupabaseError, get_supabase_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

VERIFICATION_FAILED = "Email verification failed."

# Refresh tokens outlive the access token; keep the cookie for 30 days
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


def _login_error(message: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.login_path}?error={quote(message)}")


@router.get("/callback")
async def auth_callback(
    request: Request,
    code: str | None = None,
    supabase: SupabaseClient = Depends(get_supabase_client),
) -> RedirectResponse:
    """
    Exchange the auth code from a confirmation link for a session.

    Sets the session cookies and redirects to the app. Without a code the
    visitor is sent straight to the app; a failed exchange lands on the
    login page with an error message.
    """
    if not code:
        return RedirectResponse(settings.home_path)

    verifier = request.cookies.get(settings.code_verifier_cookie)
    if not verifier:
        logger.warning("Auth callback received a code without a PKCE verifier cookie")
        return _login_error(VERIFICATION_FAILED)

    try:
        session = await supabase.exchange_code_for_session(code, verifier)
    except SupabaseError as e:
        logger.error(f"Auth code exchange failed: {e.message}")
        return _login_error(VERIFICATION_FAILED)

    logger.info(f"Signed in user {session.user_id} via auth callback")

    secure = settings.environment != "development"
    response = RedirectResponse(settings.home_path)
    response.set_cookie(
        settings.access_token_cookie,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    response.set_cookie(
        settings.refresh_token_cookie,
        session.refresh_token,
        max_age=REFRESH_COOKIE_MAX_AGE,
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    response.delete_cookie(settings.code_verifier_cookie)
    return response
