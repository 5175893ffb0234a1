"""Auth module for JWT validation and user dependencies."""

from ai_proxy.auth.dependencies import get_current_user
from ai_proxy.auth.jwt import validate_supabase_jwt
from ai_proxy.auth.schemas import TokenPayload, User

__all__ = [
    "User",
    "TokenPayload",
    "validate_supabase_jwt",
    "get_current_user",
]
