"""HTTP middleware for the auth service."""

from venty_auth.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
