"""API routers for auth service endpoints."""

from venty_auth.routers.apple import router as apple_router
from venty_auth.routers.email import router as email_router
from venty_auth.routers.facebook import router as facebook_router
from venty_auth.routers.google import router as google_router
from venty_auth.routers.health import router as health_router
from venty_auth.routers.session import router as session_router

__all__ = [
    "apple_router",
    "email_router",
    "facebook_router",
    "google_router",
    "health_router",
    "session_router",
]
