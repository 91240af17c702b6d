"""Sign in with Apple endpoint."""

import logging

from fastapi import APIRouter, Depends, Request, Response

from venty_auth.dependencies import (
    CookiePolicyDep,
    SessionServiceDep,
    UserStoreDep,
    get_apple_verifier,
)
from venty_auth.errors import AuthenticationError, UpstreamError, ValidationError
from venty_auth.routers.session import start_session
from venty_auth.schemas.auth import AuthResponse, IdTokenRequest
from venty_auth.services.oauth_service import AppleVerifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/apple", tags=["apple"])


@router.post(
    "",
    response_model=AuthResponse,
    summary="Sign in with an Apple ID token",
)
async def apple_sign_in(
    req: Request,
    response: Response,
    store: UserStoreDep,
    sessions: SessionServiceDep,
    cookies: CookiePolicyDep,
    apple: AppleVerifier = Depends(get_apple_verifier),
    request: IdTokenRequest | None = None,
) -> AuthResponse:
    """Validate an Apple ID token and sign in.

    Apple's key set being unreachable is reported like any other
    verification failure (401 invalid_token).
    """
    id_token = request.id_token if request else None
    if not id_token:
        raise ValidationError("missing_id_token")

    try:
        identity = await apple.verify(id_token)
    except UpstreamError as e:
        raise AuthenticationError("invalid_token", e.message) from e

    user = store.upsert_from_identity(identity)
    return start_session(user, req, response, sessions, cookies)
