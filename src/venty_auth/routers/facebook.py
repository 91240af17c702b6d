"""Facebook Login endpoint."""

from fastapi import APIRouter, Depends, Request, Response

from venty_auth.dependencies import (
    CookiePolicyDep,
    SessionServiceDep,
    UserStoreDep,
    get_facebook_verifier,
)
from venty_auth.errors import ValidationError
from venty_auth.routers.session import start_session
from venty_auth.schemas.auth import AccessTokenRequest, AuthResponse
from venty_auth.services.oauth_service import FacebookVerifier

router = APIRouter(prefix="/auth/facebook", tags=["facebook"])


@router.post(
    "",
    response_model=AuthResponse,
    summary="Sign in with a Facebook access token",
)
async def facebook_sign_in(
    req: Request,
    response: Response,
    store: UserStoreDep,
    sessions: SessionServiceDep,
    cookies: CookiePolicyDep,
    facebook: FacebookVerifier = Depends(get_facebook_verifier),
    request: AccessTokenRequest | None = None,
) -> AuthResponse:
    """Validate a Facebook access token, read the profile and sign in."""
    access_token = request.access_token if request else None
    if not access_token:
        raise ValidationError("missing_access_token")

    identity = await facebook.verify(access_token)
    user = store.upsert_from_identity(identity)
    return start_session(user, req, response, sessions, cookies)
