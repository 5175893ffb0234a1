"""Read-only view of the caller's daily AI quota."""

import logging

from fastapi import APIRouter, Depends

from ai_proxy.auth.dependencies import get_current_user
from ai_proxy.auth.schemas import User
from ai_proxy.dependencies.quota import get_quota_service, store_unavailable
from ai_proxy.schemas.usage import UsageSummary
from ai_proxy.services.core.quota import QuotaService
from ai_proxy.services.utils.usage import UsageStoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["usage"])


@router.get("/usage", response_model=UsageSummary, response_model_by_alias=True)
def get_usage(
    user: User = Depends(get_current_user),
    quota: QuotaService = Depends(get_quota_service),
) -> UsageSummary:
    """Today's request count, budget, and reset time for the signed-in user."""
    try:
        summary = quota.usage_summary(user.id)
    except UsageStoreError:
        logger.error(f"Usage summary unavailable for user {user.id}")
        raise store_unavailable()
    return UsageSummary(**summary)
