from .tier import SubscriptionTier
from .usage_log import UsageLog
from .user_subscription import UserSubscription

__all__ = [
    "SubscriptionTier",
    "UsageLog",
    "UserSubscription",
]
