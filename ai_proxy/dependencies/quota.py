"""Quota dependencies for FastAPI."""

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ai_proxy.auth.dependencies import get_current_user
from ai_proxy.auth.schemas import User
from ai_proxy.config import GatewayPolicy
from ai_proxy.database.session import get_db
from ai_proxy.services.core.quota import QuotaService
from ai_proxy.services.providers.gemini import GeminiClient
from ai_proxy.services.utils.usage import UsageStore, UsageStoreError

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE_DETAIL = "Service temporarily unavailable. Please try again."


def get_gateway_policy(request: Request) -> GatewayPolicy:
    """Policy the app was created with."""
    return request.app.state.policy


def get_usage_store(db: Session = Depends(get_db)) -> UsageStore:
    return UsageStore(db)


def get_quota_service(
    store: UsageStore = Depends(get_usage_store),
    policy: GatewayPolicy = Depends(get_gateway_policy),
) -> QuotaService:
    return QuotaService(store, policy)


def get_gemini_client(request: Request) -> GeminiClient:
    return GeminiClient.from_settings(request.app.state.settings)


def store_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=STORE_UNAVAILABLE_DETAIL,
    )


async def enforce_quota(
    user: User = Depends(get_current_user),
    quota: QuotaService = Depends(get_quota_service),
) -> User:
    """
    Dependency that admits the caller or raises 429/503.

    Use this in routes that spend an AI request:
        @router.post("/ai-proxy")
        async def proxy(user: User = Depends(enforce_quota)):
            ...

    Returns:
        The authenticated user if within today's budget

    Raises:
        HTTPException 429 if the daily budget is spent
        HTTPException 503 if the store cannot be read (fail closed)
    """
    try:
        decision = quota.check_quota(user.id)
    except UsageStoreError:
        logger.error(f"Quota check failed for user {user.id}, rejecting request")
        raise store_unavailable()

    if not decision.allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=quota.rejection_body(decision),
            headers={"Retry-After": str(quota.retry_after())},
        )

    return user
