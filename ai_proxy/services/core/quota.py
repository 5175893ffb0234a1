"""Tier-based daily quota for the AI proxy."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from ai_proxy.config import GatewayPolicy
from ai_proxy.services.utils.usage import (
    UsageStore,
    next_utc_midnight,
    seconds_until_utc_midnight,
    start_of_utc_day,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    tier: str
    limit: int | None
    used: int | None = None


class QuotaService:
    """
    Decide whether a caller may spend one more AI request today.

    Usage is recomputed from the usage log on every call, so there is no
    counter to keep in sync. Two concurrent requests at the boundary can
    both be admitted; that overshoot is accepted.
    """

    def __init__(self, store: UsageStore, policy: GatewayPolicy):
        self.store = store
        self.policy = policy

    def resolve_tier(self, user_id: str) -> str:
        return self.store.get_tier(user_id) or self.policy.default_tier

    def check_quota(self, user_id: str, now: datetime | None = None) -> QuotaDecision:
        """
        Check the caller against their tier's daily budget.

        Raises:
            UsageStoreError: if the tier or the usage count cannot be read
        """
        tier = self.resolve_tier(user_id)
        if self.policy.is_unlimited(tier):
            return QuotaDecision(allowed=True, tier=tier, limit=None)

        limit = self.policy.budget_for(tier)
        used = self.store.count_since(user_id, start_of_utc_day(now))
        if used >= limit:
            logger.warning(f"Daily quota exhausted for user {user_id}: tier={tier}, used={used}/{limit}")
            return QuotaDecision(allowed=False, tier=tier, limit=limit, used=used)

        logger.debug(f"Quota ok for user {user_id}: tier={tier}, used={used}/{limit}")
        return QuotaDecision(allowed=True, tier=tier, limit=limit, used=used)

    def rejection_body(self, decision: QuotaDecision) -> dict:
        """Body of the 429 response, with an upgrade hint for free users."""
        if decision.tier == self.policy.default_tier:
            upgrade_budget = self.policy.budget_for(self.policy.upgrade_tier)
            allowance = "unlimited" if upgrade_budget is None else upgrade_budget
            hint = f"Upgrade to Pro for {allowance} daily requests!"
        else:
            hint = "You've reached your daily limit."
        return {
            "error": f"Daily limit reached ({decision.limit} requests/day). {hint}",
            "limit": decision.limit,
            "used": decision.used,
            "tier": decision.tier,
        }

    def usage_summary(self, user_id: str, now: datetime | None = None) -> dict:
        """Today's usage for display; counts even for unlimited tiers."""
        now = now or datetime.now(timezone.utc)
        tier = self.resolve_tier(user_id)
        limit = self.policy.budget_for(tier)
        unlimited = self.policy.is_unlimited(tier)
        used = self.store.count_since(user_id, start_of_utc_day(now))
        return {
            "tier": tier,
            "limit": limit,
            "used": used,
            "remaining": None if unlimited else max(0, limit - used),
            "unlimited": unlimited,
            "resets_at": next_utc_midnight(now),
        }

    @staticmethod
    def retry_after(now: datetime | None = None) -> int:
        return seconds_until_utc_midnight(now)
