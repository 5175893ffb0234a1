"""Usage log and subscription access for quota checks."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ai_proxy.models.usage_log import UsageLog
from ai_proxy.models.user_subscription import UserSubscription

logger = logging.getLogger(__name__)


class UsageStoreError(Exception):
    """The subscription/usage store could not answer."""


def start_of_utc_day(now: datetime | None = None) -> datetime:
    """Midnight UTC of the day containing `now`."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def next_utc_midnight(now: datetime | None = None) -> datetime:
    return start_of_utc_day(now) + timedelta(days=1)


def seconds_until_utc_midnight(now: datetime | None = None) -> int:
    """Calculate seconds until the daily quota window resets."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int((next_utc_midnight(now) - now).total_seconds())


class UsageStore:
    """
    Read subscriptions and append usage logs.

    Only reads user_subscriptions and only inserts into usage_logs. Any
    database failure surfaces as UsageStoreError so callers can fail closed.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_tier(self, user_id: str) -> str | None:
        """Return the stored tier, or None when the user has no subscription row."""
        try:
            return self.db.execute(
                select(UserSubscription.tier).where(UserSubscription.user_id == user_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Subscription lookup failed for user {user_id}: {e}")
            raise UsageStoreError("subscription lookup failed") from e

    def count_since(self, user_id: str, since: datetime) -> int:
        """Count usage log entries for a user created at or after `since`."""
        try:
            count = self.db.execute(
                select(func.count(UsageLog.id)).where(
                    UsageLog.user_id == user_id,
                    UsageLog.created_at >= since,
                )
            ).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Usage count failed for user {user_id}: {e}")
            raise UsageStoreError("usage count failed") from e
        return int(count or 0)

    def record_usage(self, user_id: str, tokens_used: int = 1) -> UsageLog:
        """Append one usage log entry."""
        entry = UsageLog(user_id=user_id, tokens_used=tokens_used)
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Usage log write failed for user {user_id}: {e}")
            raise UsageStoreError("usage log write failed") from e
        logger.debug(f"Recorded usage for user {user_id}: tokens_used={tokens_used}")
        return entry
