"""Session token service.

Sessions are stateless: a compact HS256 JWT carrying the canonical user id,
signed with the process-wide ``JWT_SECRET``. Nothing is stored server-side.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from venty_auth.config import AuthSettings, get_settings
from venty_auth.errors import ConfigurationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class SessionClaims:
    """Verified contents of a session token."""

    user_id: str
    issued_at: datetime
    expires_at: datetime


class SessionService:
    """Issue and verify session tokens."""

    def __init__(self, settings: AuthSettings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def ttl(self) -> timedelta:
        return timedelta(days=self.settings.session_ttl_days)

    def issue(self, user_id: str, now: datetime | None = None) -> str:
        """Create a signed session token for a user.

        Args:
            user_id: Canonical user id
            now: Issue time (defaults to the current time)

        Returns:
            Signed JWT

        Raises:
            ConfigurationError: If JWT_SECRET is not set
        """
        secret = self.settings.jwt_secret
        if not secret:
            raise ConfigurationError("jwt_secret_missing", "JWT_SECRET is not configured")

        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self.ttl

        claims = {
            "userId": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(claims, secret, algorithm=ALGORITHM)

    def verify(self, token: str, now: datetime | None = None) -> SessionClaims | None:
        """Validate a session token.

        Returns None for a missing secret, bad signature, malformed token,
        missing user id or an expired token. Never raises.
        """
        secret = self.settings.jwt_secret
        if not secret or not token:
            return None

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug(f"Session token rejected: {e}")
            return None

        user_id = payload.get("userId")
        exp = payload.get("exp")
        iat = payload.get("iat")
        if not isinstance(user_id, str) or not user_id or not isinstance(exp, int):
            return None

        current = now or datetime.now(timezone.utc)
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        if current >= expires_at:
            logger.debug(f"Session token for {user_id} expired at {expires_at.isoformat()}")
            return None

        issued_at = (
            datetime.fromtimestamp(iat, tz=timezone.utc) if isinstance(iat, int) else expires_at - self.ttl
        )
        return SessionClaims(user_id=user_id, issued_at=issued_at, expires_at=expires_at)
