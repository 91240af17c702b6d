"""Session cookie policy.

The service usually sits behind a TLS-terminating proxy, so whether the
client connection was secure is inferred from ``X-Forwarded-Proto`` or the
hosting platform's environment markers rather than the raw transport.
"""

from fastapi import Request, Response

from venty_auth.config import AuthSettings, get_settings


class CookiePolicy:
    """Builds the Set-Cookie attributes for the session cookie."""

    def __init__(self, settings: AuthSettings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def cookie_name(self) -> str:
        return self.settings.session_cookie_name

    def is_secure(self, request: Request) -> bool:
        """Check whether the inbound request reached us over HTTPS."""
        forwarded = request.headers.get("x-forwarded-proto", "")
        if forwarded.split(",")[0].strip().lower() == "https":
            return True
        if self.settings.on_hosting_platform:
            return True
        return request.url.scheme == "https"

    def set_session(self, response: Response, request: Request, token: str) -> None:
        """Attach the session cookie to a response."""
        response.set_cookie(
            self.cookie_name,
            token,
            max_age=self.settings.session_max_age,
            path="/",
            secure=self.is_secure(request),
            httponly=True,
            samesite="lax",
        )

    def clear_session(self, response: Response, request: Request) -> None:
        """Instruct the client to discard the session cookie."""
        response.set_cookie(
            self.cookie_name,
            "",
            max_age=0,
            path="/",
            secure=self.is_secure(request),
            httponly=True,
            samesite="lax",
        )

    def read_token(self, request: Request) -> str | None:
        return request.cookies.get(self.cookie_name) or None
