"""Venty Auth Service - FastAPI Application.

Sign-in service providing:
- Google OAuth (redirect flow and client-side ID tokens)
- Sign in with Apple
- Facebook Login
- Email/password credentials
- Stateless HS256 session cookies
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from venty_auth import __version__
from venty_auth.config import AuthSettings, get_settings
from venty_auth.errors import AuthError
from venty_auth.middleware import RequestLoggingMiddleware
from venty_auth.routers import (
    apple_router,
    email_router,
    facebook_router,
    google_router,
    health_router,
    session_router,
)
from venty_auth.schemas.auth import ErrorResponse

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    """Configure root and uvicorn logging at the given level."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Set uvicorn loggers to same level
    logging.getLogger("uvicorn").setLevel(level)
    logging.getLogger("uvicorn.error").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(level)


def error_response(code: str, status_code: int) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=code).model_dump(), status_code=status_code)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings: AuthSettings = app.state.settings
    logger.info(f"Starting auth service v{__version__}")
    logger.info(f"User store: {settings.users_path}")
    logger.info(f"Log level: {settings.log_level}")
    if not settings.jwt_secret:
        logger.warning("JWT_SECRET is not set; sign-in will fail until it is configured")

    yield

    logger.info("Shutting down auth service")


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"ok": false, "error": code}``."""

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")
        return error_response(exc.code, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(f"{request.method} {request.url.path} invalid request: {exc.errors()}")
        return error_response("invalid_request", status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            code = "method_not_allowed"
        elif exc.status_code == status.HTTP_404_NOT_FOUND:
            code = "not_found"
        else:
            code = "http_error"
        return error_response(code, exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return error_response("server_error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(settings: AuthSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Venty Auth",
        description="Sign-in and session service for Venty",
        version=__version__,
        docs_url="/auth/docs",
        redoc_url="/auth/redoc",
        openapi_url="/auth/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    cors_origins = settings.cors_origins
    if cors_origins:
        logger.info(f"CORS origins: {cors_origins}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if settings.debug_requests:
        app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(session_router)
    app.include_router(email_router)
    app.include_router(google_router)
    app.include_router(apple_router)
    app.include_router(facebook_router)

    return app


configure_logging(get_settings().log_level)

# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "venty_auth.main:app",
        host="127.0.0.1",
        port=settings.auth_service_port,
        reload=False,
    )
