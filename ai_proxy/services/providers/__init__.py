"""External API provider wrappers."""

from ai_proxy.services.providers.gemini import (
    GeminiClient,
    MissingApiKeyError,
    UpstreamError,
    UpstreamTimeoutError,
)

__all__ = [
    "GeminiClient",
    "MissingApiKeyError",
    "UpstreamError",
    "UpstreamTimeoutError",
]
