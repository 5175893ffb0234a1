"""API routers."""

from ai_proxy.routers import health, proxy, usage

__all__ = [
    "health",
    "proxy",
    "usage",
]
