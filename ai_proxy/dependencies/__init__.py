"""FastAPI dependencies."""

from .quota import (
    enforce_quota,
    get_gateway_policy,
    get_gemini_client,
    get_quota_service,
    get_usage_store,
)

__all__ = [
    "enforce_quota",
    "get_gateway_policy",
    "get_gemini_client",
    "get_quota_service",
    "get_usage_store",
]
