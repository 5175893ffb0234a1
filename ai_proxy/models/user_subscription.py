"""Subscription tier per user (owned by billing, read-only here)."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ai_proxy.database.base import Base, created_at_column, updated_at_column
from ai_proxy.models.tier import SubscriptionTier


class UserSubscription(Base):
    """
    One row per user with their current tier.

    Written by RevenueCat webhooks and the founder-claim flow; the AI proxy
    only ever reads the tier. No row means the user is on the free tier.
    """

    __tablename__ = "user_subscriptions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        index=True,
        nullable=False,
    )
    tier: Mapped[str] = mapped_column(
        String(32),
        default=SubscriptionTier.FREE.value,
        nullable=False,
    )

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()
