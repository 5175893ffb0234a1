"""FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ai_proxy.config import GatewayPolicy, Settings, get_settings
from ai_proxy.database.engine import database_url
from ai_proxy.middleware.cors import cors_headers, setup_cors_middleware
from ai_proxy.routers import health, proxy, usage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Log to stdout (the hosting platform captures it)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render every stage failure as {"error": ...}."""
        error_id = str(uuid4())

        # Quota and validation errors carry a ready-made body
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = {"error": str(exc.detail)}

        logger.warning(
            f"HTTP {exc.status_code} [{error_id}]: {content.get('error')} - {request.method} {request.url.path}"
        )

        headers = dict(getattr(exc, "headers", None) or {})
        headers["X-Error-Id"] = error_id
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Query/path validation failures use the same 400 shape as body validation."""
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        logger.warning(f"Validation error: {errors} - {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid input", "details": errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all handler; runs outside the middleware stack, so add CORS here."""
        error_id = str(uuid4())

        logger.error(
            f"Unhandled exception [{error_id}]: {type(exc).__name__}: {exc} - "
            f"{request.method} {request.url.path}",
            exc_info=True,
        )

        headers = cors_headers(request.app.state.policy, request.headers.get("origin"))
        headers["X-Error-Id"] = error_id
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
            headers=headers,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refuse to start without a database connection configured."""
    database_url(app.state.settings)
    yield


def create_app(settings: Settings | None = None, policy: GatewayPolicy | None = None) -> FastAPI:
    """
    Build the AI proxy app.

    The gateway policy (tier budgets, origin allow-lists) is fixed here and
    shared read-only by every request.
    """
    settings = settings or get_settings()
    policy = policy or GatewayPolicy.from_settings(settings)

    app = FastAPI(
        title="MyMacro AI Proxy",
        description="Authenticated, quota-limited proxy from the MyMacro app to Gemini",
        version="0.1.0",
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.policy = policy

    setup_cors_middleware(app, policy)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(proxy.router)
    app.include_router(usage.router)

    logger.info(
        f"AI proxy configured: environment={settings.environment}, model={settings.gemini_model}, "
        f"origins={len(policy.allowed_origins)}"
    )
    return app


configure_logging(get_settings().log_level)
app = create_app()
