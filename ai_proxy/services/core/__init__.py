"""Core gateway logic: quota decisions and upstream request routing."""

from ai_proxy.services.core.quota import QuotaDecision, QuotaService
from ai_proxy.services.core.request_builder import (
    MissingMediaError,
    NluCall,
    SpeechCall,
    VisionCall,
    build_upstream_request,
    route_request,
)

__all__ = [
    # quota
    "QuotaDecision",
    "QuotaService",
    # request_builder
    "MissingMediaError",
    "NluCall",
    "SpeechCall",
    "VisionCall",
    "build_upstream_request",
    "route_request",
]
