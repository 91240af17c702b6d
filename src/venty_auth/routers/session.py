"""Session endpoints: current user and logout."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from venty_auth.dependencies import CookiePolicyDep, CurrentUserDep
from venty_auth.models.user import User
from venty_auth.schemas.auth import AuthResponse, OkResponse, SessionResponse, UserResponse
from venty_auth.services.cookie_policy import CookiePolicy
from venty_auth.services.session_service import SessionService

router = APIRouter(prefix="/auth", tags=["session"])


def start_session(
    user: User,
    request: Request,
    response: Response,
    sessions: SessionService,
    cookies: CookiePolicy,
) -> AuthResponse:
    """Issue a session token for ``user`` and attach it as a cookie."""
    token = sessions.issue(user.user_id)
    cookies.set_session(response, request, token)
    return AuthResponse.for_user(user)


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Get the signed-in user",
)
async def me(current_user: CurrentUserDep) -> SessionResponse | JSONResponse:
    """Return the user behind the session cookie.

    Never fails: a missing, expired or tampered cookie yields ``{ok: false}``.
    """
    if current_user is None:
        return JSONResponse({"ok": False})
    return SessionResponse(ok=True, user=UserResponse.from_user(current_user))


@router.post(
    "/logout",
    response_model=OkResponse,
    summary="Clear the session cookie",
)
async def logout(
    request: Request,
    response: Response,
    cookies: CookiePolicyDep,
) -> OkResponse:
    """Expire the session cookie on the client.

    Sessions are stateless, so there is nothing to revoke server-side.
    """
    cookies.clear_session(response, request)
    return OkResponse()
