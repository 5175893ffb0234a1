from datetime import datetime
from uuid import uuid4

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ai_proxy.database.base import Base, created_at_column


class UsageLog(Base):
    """
    Append-only log of completed AI proxy calls.

    One row per successful upstream call. Daily quotas are computed by
    counting a user's rows since the start of the UTC day.
    """

    __tablename__ = "usage_logs"
    __table_args__ = (
        Index("ix_usage_logs_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
    )

    # Unit count per call, not a real token count
    tokens_used: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    created_at: Mapped[datetime] = created_at_column()
