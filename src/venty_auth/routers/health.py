"""Health check endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from venty_auth.dependencies import SettingsDep, UserStoreDep
from venty_auth.errors import StoreCorruptedError

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get(
    "/auth/health",
    summary="Health check with configuration validation",
)
async def health_check(settings: SettingsDep, store: UserStoreDep) -> dict:
    """Check auth service health and configuration.

    Verifies:
    - The user store is readable
    - The session signing secret is set
    - Which sign-in providers are configured
    """
    checks: dict[str, str] = {}
    warnings: list[str] = []
    overall_status = "ok"

    try:
        users = store.load()
        checks["user_store"] = "ok"
    except StoreCorruptedError as e:
        logger.error(f"User store check failed: {e.message}")
        users = []
        checks["user_store"] = "error"
        overall_status = "degraded"

    if settings.jwt_secret:
        checks["jwt"] = "ok"
    else:
        warnings.append("JWT_SECRET not set; sessions cannot be issued")
        checks["jwt"] = "error"
        overall_status = "degraded"

    checks["google"] = "ok" if settings.google_enabled else "disabled"
    checks["facebook"] = "ok" if settings.facebook_enabled else "disabled"
    checks["apple"] = "ok" if settings.apple_client_id else "no_audience_check"
    if settings.google_client_id and not settings.google_enabled:
        warnings.append("GOOGLE_CLIENT_ID set but GOOGLE_CLIENT_SECRET or BASE_URL missing")

    return {
        "status": overall_status,
        "service": "auth",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "users": len(users),
        "checks": checks,
        "warnings": warnings or None,
    }


@router.get(
    "/health",
    summary="Simple health check",
)
async def simple_health() -> dict:
    """Simple health check (no dependencies).

    Used for load balancer health checks.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
