from enum import Enum


class SubscriptionTier(str, Enum):
    """Subscription tiers managed by the billing subsystem."""

    FREE = "free"
    PRO = "pro"
    FOUNDER = "founder"
