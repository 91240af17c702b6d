"""Pydantic schemas for auth service request/response validation.

Request fields are all optional at the schema level so that a missing
field produces the endpoint's own error code (e.g. ``missing_id_token``)
instead of a generic validation failure. Wire names are camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field

from venty_auth.models.user import User


# =============================================================================
# Common Response Schemas
# =============================================================================


class OkResponse(BaseModel):
    """Bare success response."""

    ok: bool = True


class ErrorResponse(BaseModel):
    """Error response schema."""

    ok: bool = False
    error: str


# =============================================================================
# User Schemas
# =============================================================================


class ProviderLinkResponse(BaseModel):
    """A linked external identity."""

    model_config = ConfigDict(populate_by_name=True)

    provider: str
    provider_user_id: str = Field(alias="providerUserId")


class UserResponse(BaseModel):
    """Public user information. Never carries the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    email: str | None = None
    name: str | None = None
    picture: str | None = None
    providers: list[ProviderLinkResponse] = Field(default_factory=list)
    created_at: str = Field(alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            user_id=user.user_id,
            email=user.email,
            name=user.name,
            picture=user.picture,
            providers=[
                ProviderLinkResponse(provider=p.provider, provider_user_id=p.provider_user_id)
                for p in user.providers
            ],
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    """Successful sign-in response."""

    ok: bool = True
    user: UserResponse

    @classmethod
    def for_user(cls, user: User) -> "AuthResponse":
        return cls(user=UserResponse.from_user(user))


class SessionResponse(BaseModel):
    """Current-session response. ``user`` is only present when signed in."""

    ok: bool
    user: UserResponse | None = None


# =============================================================================
# Provider Sign-In Schemas
# =============================================================================


class IdTokenRequest(BaseModel):
    """Sign-in with a provider-issued ID token (Google, Apple)."""

    model_config = ConfigDict(populate_by_name=True)

    id_token: str | None = Field(default=None, alias="idToken")


class AccessTokenRequest(BaseModel):
    """Sign-in with a provider access token (Facebook)."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str | None = Field(default=None, alias="accessToken")


# =============================================================================
# Email/Password Schemas
# =============================================================================


class EmailLoginRequest(BaseModel):
    """Email/password login request."""

    email: str | None = None
    password: str | None = None


class EmailSignupRequest(BaseModel):
    """Email/password signup request."""

    email: str | None = None
    password: str | None = None
    name: str | None = None
