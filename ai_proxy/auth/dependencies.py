"""FastAPI dependencies for authentication."""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ai_proxy.auth.jwt import unauthorized, validate_supabase_jwt
from ai_proxy.auth.schemas import User

logger = logging.getLogger(__name__)

# HTTPBearer with auto_error=False so missing tokens get our 401 body, not a 403
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    Resolve the caller from the Authorization bearer token.

    The token is verified on every request; nothing about the caller is
    cached between requests.

    Usage:
        @router.post("/ai-proxy")
        async def proxy(user: User = Depends(get_current_user)):
            # user.id is the Supabase auth user id
            ...
    """
    if not credentials:
        logger.warning("Rejected request without bearer credentials")
        raise unauthorized()

    token_payload = validate_supabase_jwt(credentials.credentials)
    return User(id=token_payload.sub, email=token_payload.email)
