"""Email/password authentication endpoints."""

import logging

from fastapi import APIRouter, Request, Response, status

from venty_auth.dependencies import (
    CookiePolicyDep,
    PasswordServiceDep,
    SessionServiceDep,
    UserStoreDep,
)
from venty_auth.errors import AuthenticationError, ValidationError
from venty_auth.routers.session import start_session
from venty_auth.schemas.auth import AuthResponse, EmailLoginRequest, EmailSignupRequest
from venty_auth.services import identity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/email", tags=["email"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an email/password credential",
)
async def signup(
    req: Request,
    response: Response,
    store: UserStoreDep,
    passwords: PasswordServiceDep,
    sessions: SessionServiceDep,
    cookies: CookiePolicyDep,
    request: EmailSignupRequest | None = None,
) -> AuthResponse:
    """Register an email/password credential and sign in.

    - Rejects an email that already has a password (409 email_exists)
    - Links to an existing user with the same email (e.g. from Google)
    - Otherwise creates a new user
    """
    email = request.email if request else None
    password = request.password if request else None
    if not email or not email.strip() or not password:
        raise ValidationError("missing_credentials")
    if not passwords.is_acceptable(password):
        raise ValidationError("weak_password", "Password is shorter than the minimum length")

    identity = identity_service.from_email(email, request.name)
    user = store.register_password(identity, passwords.hash_password(password))
    logger.info(f"Password credential registered for user {user.user_id}")

    return start_session(user, req, response, sessions, cookies)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Sign in with email and password",
)
async def login(
    req: Request,
    response: Response,
    store: UserStoreDep,
    passwords: PasswordServiceDep,
    sessions: SessionServiceDep,
    cookies: CookiePolicyDep,
    request: EmailLoginRequest | None = None,
) -> AuthResponse:
    """Sign in with email and password."""
    email = request.email if request else None
    password = request.password if request else None
    if not email or not email.strip() or not password:
        raise ValidationError("missing_credentials")

    user = store.find_by_email(email, require_password=True)
    if user is None or not passwords.verify_password(password, user.password_hash or ""):
        raise AuthenticationError("invalid_login", "Invalid email or password")

    return start_session(user, req, response, sessions, cookies)
