"""
Gemini REST client for the AI proxy.

Calls the generateContent endpoint directly so the provider's JSON can be
handed back to the app unchanged. The API key travels in the
x-goog-api-key header, never in the URL, so it stays out of access logs.
"""

import logging
from typing import Any

import httpx

from ai_proxy.config import Settings, get_settings

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Gemini rejected the request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Gemini did not answer within the configured timeout."""


class MissingApiKeyError(RuntimeError):
    """No Gemini API key configured on the server."""


class GeminiClient:
    """One-shot generateContent calls; a fresh HTTP client per request."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GeminiClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.upstream_timeout_seconds,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate_content(self, body: dict[str, Any]) -> dict[str, Any]:
        """
        POST a generateContent body and return Gemini's JSON response.

        Args:
            body: Request body built by build_upstream_request()

        Returns:
            Parsed JSON response from Gemini

        Raises:
            MissingApiKeyError: If the server has no Gemini key
            UpstreamTimeoutError: If Gemini does not answer in time
            UpstreamError: On a non-2xx response, transport error, or non-JSON body
        """
        if not self.api_key:
            raise MissingApiKeyError("Server Misconfiguration: Missing Gemini Key")

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Gemini request timed out after {self.timeout}s: {type(e).__name__}")
            raise UpstreamTimeoutError("Upstream AI service timed out. Please try again.") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {type(e).__name__}: {e}")
            raise UpstreamError(f"Gemini API unreachable: {type(e).__name__}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Gemini returned non-JSON body (status {response.status_code})")
            raise UpstreamError("Gemini API Error", response.status_code) from e

        if not response.is_success:
            message = _error_message(data)
            logger.error(f"Gemini API error {response.status_code}: {message}")
            raise UpstreamError(message, response.status_code)

        return data


def _error_message(data: Any) -> str:
    """Pull error.message out of a Gemini error body."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return "Gemini API Error"
