"""Internal utility services."""

from ai_proxy.services.utils.usage import (
    UsageStore,
    UsageStoreError,
    next_utc_midnight,
    seconds_until_utc_midnight,
    start_of_utc_day,
)

__all__ = [
    "UsageStore",
    "UsageStoreError",
    "next_utc_midnight",
    "seconds_until_utc_midnight",
    "start_of_utc_day",
]
