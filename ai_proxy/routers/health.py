"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """Liveness plus whether the upstream key is present (never the key itself)."""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "upstream": "configured" if settings.gemini_api_key else "missing_key",
    }
