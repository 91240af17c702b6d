"""Auth service business logic."""

from venty_auth.services.cookie_policy import CookiePolicy
from venty_auth.services.oauth_service import AppleVerifier, FacebookVerifier, GoogleVerifier
from venty_auth.services.password_service import PasswordService
from venty_auth.services.session_service import SessionService
from venty_auth.services.user_store import UserStore

__all__ = [
    "AppleVerifier",
    "CookiePolicy",
    "FacebookVerifier",
    "GoogleVerifier",
    "PasswordService",
    "SessionService",
    "UserStore",
]
