from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UsageSummary(BaseModel):
    """Today's AI proxy usage for the current caller."""

    tier: str
    limit: int | None
    used: int
    remaining: int | None
    unlimited: bool
    resets_at: datetime = Field(alias="resetsAt")

    model_config = ConfigDict(populate_by_name=True)
