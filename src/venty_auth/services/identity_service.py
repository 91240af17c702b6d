"""Identity normalization.

Maps provider-specific verification results (Google token-info, Apple ID
token claims, Facebook Graph profile, email signup fields) into the single
``Identity`` shape consumed by the user store. Pure functions, no I/O.
"""

from dataclasses import dataclass
from typing import Any

from venty_auth.errors import AuthenticationError, ValidationError


class Provider:
    """Provider identifiers stored in user provider links."""

    GOOGLE = "google"
    APPLE = "apple"
    FACEBOOK = "facebook"
    EMAIL = "email"


@dataclass(frozen=True)
class Identity:
    """A verified claim that provider P's user with subject id S is signing in."""

    provider: str
    provider_id: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None


def normalize_email(email: Any) -> str | None:
    """Trim and lower-case an email; empty values become None."""
    if not isinstance(email, str):
        return None
    email = email.strip().lower()
    return email or None


def _text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _subject(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise AuthenticationError("invalid_token", "Verified credential has no subject")
    return str(value).strip()


def from_google(token_info: dict[str, Any]) -> Identity:
    """Build an identity from Google's token-info response."""
    return Identity(
        provider=Provider.GOOGLE,
        provider_id=_subject(token_info.get("sub")),
        email=normalize_email(token_info.get("email")),
        name=_text(token_info.get("name")),
        picture=_text(token_info.get("picture")),
    )


def from_apple(claims: dict[str, Any]) -> Identity:
    """Build an identity from verified Apple ID token claims.

    Apple's token never carries the user's name.
    """
    return Identity(
        provider=Provider.APPLE,
        provider_id=_subject(claims.get("sub")),
        email=normalize_email(claims.get("email")),
    )


def from_facebook(profile: dict[str, Any]) -> Identity:
    """Build an identity from a Graph API ``/me`` profile."""
    picture = profile.get("picture")
    picture_url = None
    if isinstance(picture, dict):
        picture_url = _text((picture.get("data") or {}).get("url"))
    return Identity(
        provider=Provider.FACEBOOK,
        provider_id=_subject(profile.get("id")),
        email=normalize_email(profile.get("email")),
        name=_text(profile.get("name")),
        picture=picture_url,
    )


def from_email(email: str, name: str | None = None) -> Identity:
    """Build an identity for an email/password signup.

    The normalized email doubles as the provider-scoped subject id.
    """
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("missing_credentials", "Email is empty")
    return Identity(
        provider=Provider.EMAIL,
        provider_id=normalized,
        email=normalized,
        name=_text(name),
    )
