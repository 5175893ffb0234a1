"""Origin-checked CORS headers for every response.

Starlette's CORSMiddleware omits the allow-origin header for unknown
origins; the mobile web build expects the primary production origin to be
returned instead, and never a wildcard.
"""

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse

from ai_proxy.config import GatewayPolicy

ALLOWED_HEADERS = "authorization, x-client-info, apikey, content-type"


def cors_headers(policy: GatewayPolicy, origin: str | None) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": policy.cors_origin_for(origin),
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Vary": "Origin",
    }


class OriginPolicyMiddleware(BaseHTTPMiddleware):
    """Answer pre-flight requests and stamp CORS headers on everything else."""

    def __init__(self, app, policy: GatewayPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next):
        headers = cors_headers(self.policy, request.headers.get("origin"))

        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response


def setup_cors_middleware(app: FastAPI, policy: GatewayPolicy) -> None:
    """Add the origin policy middleware to a FastAPI app."""
    app.add_middleware(OriginPolicyMiddleware, policy=policy)


__all__ = ["ALLOWED_HEADERS", "OriginPolicyMiddleware", "cors_headers", "setup_cors_middleware"]
