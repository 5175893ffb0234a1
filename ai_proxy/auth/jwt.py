"""Supabase JWT validation."""

import logging

import jwt
from fastapi import HTTPException, status
from jwt import PyJWKClient

from ai_proxy.auth.schemas import TokenPayload
from ai_proxy.config import get_settings

logger = logging.getLogger(__name__)

UNAUTHORIZED_DETAIL = "Unauthorized: User not logged in."

# A signed token missing either claim is rejected by jwt.decode
DECODE_OPTIONS = {"verify_aud": False, "require": ["exp", "sub"]}

_jwks_client = None


def get_jwks_client():
    """Get or create JWKS client."""
    global _jwks_client
    if _jwks_client is None:
        settings = get_settings()
        if settings.supabase_url:
            jwks_url = f"{settings.supabase_url}/auth/v1/.well-known/jwks.json"
            _jwks_client = PyJWKClient(jwks_url)
    return _jwks_client


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHORIZED_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _to_token_payload(claims: dict) -> TokenPayload:
    # The anon/service keys are JWTs too, but carry no user
    if not claims.get("sub") or claims.get("role", "authenticated") != "authenticated":
        raise unauthorized()
    return TokenPayload(
        sub=claims["sub"],
        email=claims.get("email"),
        exp=claims["exp"],
        role=claims.get("role", "authenticated"),
    )


def validate_supabase_jwt(token: str) -> TokenPayload:
    """
    Validate Supabase JWT and extract claims.

    Args:
        token: The JWT token string (without "Bearer " prefix)

    Returns:
        TokenPayload with user_id (sub), email, and expiration

    Raises:
        HTTPException 401 on invalid/expired token or a non-user token
        HTTPException 500 if neither JWKS nor a shared secret is configured
    """
    settings = get_settings()

    # First try JWKS verification (asymmetric signing keys)
    jwks_client = get_jwks_client()
    if jwks_client:
        try:
            signing_key = jwks_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["ES256", "RS256"],
                options=DECODE_OPTIONS,
            )
            return _to_token_payload(claims)
        except jwt.exceptions.PyJWTError as e:
            if not settings.supabase_jwt_secret:
                logger.info(f"JWKS verification failed: {e}")
                raise unauthorized()
            logger.debug(f"JWKS verification failed, trying shared secret: {e}")

    # Fallback to HS256 with legacy secret
    if not settings.supabase_jwt_secret:
        logger.error("Neither SUPABASE_URL nor SUPABASE_JWT_SECRET is configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT secret not configured",
        )

    try:
        claims = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            options=DECODE_OPTIONS,
        )
    except jwt.exceptions.PyJWTError:
        raise unauthorized()
    return _to_token_payload(claims)
