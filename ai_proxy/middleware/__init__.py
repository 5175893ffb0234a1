from .cors import OriginPolicyMiddleware, cors_headers, setup_cors_middleware

__all__ = ["OriginPolicyMiddleware", "cors_headers", "setup_cors_middleware"]
