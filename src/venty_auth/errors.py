"""Error taxonomy for the auth service.

Every error carries a stable string ``code`` that is returned to clients as
``{"ok": false, "error": code}``. The ``message`` is for logs only.
"""

from fastapi import status


class AuthError(Exception):
    """Base class for failures that map to a flat JSON error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        code: str,
        message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.message = message or code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AuthError):
    """A required request field is missing or unusable."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AuthError):
    """Bad credential, signature, expiry or audience."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ConflictError(AuthError):
    """The operation would duplicate an existing credential."""

    status_code = status.HTTP_409_CONFLICT


class ConfigurationError(AuthError):
    """A required secret or setting is missing. Not retryable."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StoreCorruptedError(ConfigurationError):
    """The persisted user store exists but cannot be parsed."""

    def __init__(self, message: str) -> None:
        super().__init__("store_corrupted", message)


class UpstreamError(AuthError):
    """An identity provider was unreachable or answered unexpectedly."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        provider: str,
        message: str,
        code: str = "upstream_unavailable",
        status_code: int | None = None,
    ) -> None:
        super().__init__(code, message, status_code)
        self.provider = provider
