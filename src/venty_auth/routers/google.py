"""Google sign-in endpoints.

``GET /auth/google`` drives the authorization-code redirect flow:

- no ``code``: redirect to Google's consent screen, carrying ``state``
- ``code``: exchange it, validate the ID token, start a session and
  redirect to ``BASE_URL`` + the ``state`` path (only if it is a safe
  same-origin relative path, otherwise ``/``)

``POST /auth/google`` accepts an ID token obtained client-side.
"""

import logging
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse

from venty_auth.dependencies import (
    CookiePolicyDep,
    SessionServiceDep,
    SettingsDep,
    UserStoreDep,
    get_google_verifier,
)
from venty_auth.errors import AuthenticationError, ValidationError
from venty_auth.routers.session import start_session
from venty_auth.schemas.auth import AuthResponse, IdTokenRequest
from venty_auth.services.oauth_service import GoogleVerifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/google", tags=["google"])


def safe_redirect_path(target: str | None) -> str:
    """Return ``target`` if it is a same-origin relative path, else ``/``.

    Accepted: ``/dashboard``, ``/budget?month=3``. Rejected: absolute URLs,
    scheme-relative ``//host``, backslash tricks, and anything containing
    whitespace or control characters.
    """
    if not target or not target.startswith("/") or target.startswith("//"):
        return "/"
    if "\\" in target or any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in target):
        return "/"

    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return "/"
    return target


@router.get(
    "",
    summary="Google OAuth redirect flow",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
)
async def google_redirect_flow(
    req: Request,
    settings: SettingsDep,
    store: UserStoreDep,
    sessions: SessionServiceDep,
    cookies: CookiePolicyDep,
    google: GoogleVerifier = Depends(get_google_verifier),
    code: str | None = Query(None),
    state: str | None = Query(None),
    error: str | None = Query(None),
) -> RedirectResponse:
    """Start or complete Google's authorization-code flow."""
    google.require_code_flow()

    if error:
        logger.warning(f"Google OAuth returned error: {error}")
        raise AuthenticationError("oauth_denied", f"Google OAuth error: {error}")

    if not code:
        return RedirectResponse(
            url=google.build_authorization_url(state),
            status_code=status.HTTP_302_FOUND,
        )

    identity = await google.verify_code(code)
    user = store.upsert_from_identity(identity)

    target = f"{settings.base_url.rstrip('/')}{safe_redirect_path(state)}"
    response = RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
    start_session(user, req, response, sessions, cookies)
    logger.info(f"Google sign-in for user {user.user_id}")
    return response


@router.post(
    "",
    response_model=AuthResponse,
    summary="Sign in with a Google ID token",
)
async def google_id_token(
    req: Request,
    response: Response,
    store: UserStoreDep,
    sessions: SessionServiceDep,
    cookies: CookiePolicyDep,
    google: GoogleVerifier = Depends(get_google_verifier),
    request: IdTokenRequest | None = None,
) -> AuthResponse:
    """Validate a Google ID token and sign in."""
    id_token = request.id_token if request else None
    if not id_token:
        raise ValidationError("missing_id_token")

    identity = await google.verify(id_token)
    user = store.upsert_from_identity(identity)
    return start_session(user, req, response, sessions, cookies)
