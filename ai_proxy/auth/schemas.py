"""Auth schemas for user and token data."""

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated caller of the AI proxy."""

    id: str
    email: str | None = None


class TokenPayload(BaseModel):
    """Claims we rely on from a Supabase access token."""

    sub: str  # user_id
    email: str | None = None
    exp: int
    role: str = "authenticated"
