"""Pydantic schemas for API request/response validation."""

from ai_proxy.schemas.proxy import Intent, ProxyRequest
from ai_proxy.schemas.usage import UsageSummary

__all__ = [
    "Intent",
    "ProxyRequest",
    "UsageSummary",
]
