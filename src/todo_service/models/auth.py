"""Auth models for Supabase sessions."""

from pydantic import BaseModel


class AuthUser(BaseModel):
    """Signed-in user, with the token used to act on their behalf."""

    id: str
    email: str | None = None
    access_token: str


class AuthSession(BaseModel):
    """Session issued by the auth code exchange."""

    access_token: str
    refresh_token: str
    expires_in: int = 3600
    user_id: str | None = None
