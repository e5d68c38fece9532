"""HTTP middleware."""
from groupshare.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
