"""Pydantic schemas for request/response validation."""

from venty_auth.schemas.auth import (
    # Requests
    AccessTokenRequest,
    EmailLoginRequest,
    EmailSignupRequest,
    IdTokenRequest,
    # Responses
    AuthResponse,
    ErrorResponse,
    OkResponse,
    SessionResponse,
    UserResponse,
)

__all__ = [
    "AccessTokenRequest",
    "EmailLoginRequest",
    "EmailSignupRequest",
    "IdTokenRequest",
    "AuthResponse",
    "ErrorResponse",
    "OkResponse",
    "SessionResponse",
    "UserResponse",
]
