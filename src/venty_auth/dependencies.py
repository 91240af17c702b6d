"""FastAPI dependencies for the auth service.

Routers receive their collaborators through these functions so tests can
swap any of them with ``app.dependency_overrides``.
"""

import logging
from typing import Annotated

import httpx
from fastapi import Depends, Request

from venty_auth.config import AuthSettings, get_settings
from venty_auth.models.user import User
from venty_auth.services.cookie_policy import CookiePolicy
from venty_auth.services.oauth_service import AppleVerifier, FacebookVerifier, GoogleVerifier
from venty_auth.services.password_service import PasswordService, get_password_service
from venty_auth.services.session_service import SessionService
from venty_auth.services.user_store import UserStore

logger = logging.getLogger(__name__)

SettingsDep = Annotated[AuthSettings, Depends(get_settings)]


def get_http_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for outbound provider calls (None = real network)."""
    return None


TransportDep = Annotated[httpx.AsyncBaseTransport | None, Depends(get_http_transport)]


def get_user_store(settings: SettingsDep) -> UserStore:
    return UserStore(settings.users_path)


def get_session_service(settings: SettingsDep) -> SessionService:
    return SessionService(settings)


def get_cookie_policy(settings: SettingsDep) -> CookiePolicy:
    return CookiePolicy(settings)


def get_google_verifier(settings: SettingsDep, transport: TransportDep) -> GoogleVerifier:
    return GoogleVerifier(settings, transport)


def get_apple_verifier(settings: SettingsDep, transport: TransportDep) -> AppleVerifier:
    return AppleVerifier(settings, transport)


def get_facebook_verifier(settings: SettingsDep, transport: TransportDep) -> FacebookVerifier:
    return FacebookVerifier(settings, transport)


UserStoreDep = Annotated[UserStore, Depends(get_user_store)]
SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]
CookiePolicyDep = Annotated[CookiePolicy, Depends(get_cookie_policy)]
PasswordServiceDep = Annotated[PasswordService, Depends(get_password_service)]


async def get_current_user_optional(
    request: Request,
    store: UserStoreDep,
    sessions: SessionServiceDep,
    cookies: CookiePolicyDep,
) -> User | None:
    """Resolve the signed-in user from the session cookie.

    Any failure (no cookie, bad or expired token, unknown user, unreadable
    store) is indistinguishable from "not signed in".
    """
    token = cookies.read_token(request)
    if not token:
        return None

    try:
        claims = sessions.verify(token)
        if claims is None:
            return None
        return store.get(claims.user_id)
    except Exception as e:
        logger.warning(f"Session lookup failed: {e}")
        return None


CurrentUserDep = Annotated[User | None, Depends(get_current_user_optional)]
