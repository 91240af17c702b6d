"""Password hashing and verification service."""

import hashlib
import secrets

# scrypt cost parameters and output length of stored hashes
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_DKLEN = 64
SALT_BYTES = 16

MIN_PASSWORD_LENGTH = 8


class PasswordService:
    """Service for password hashing.

    Uses scrypt with a random per-user salt. Stored hashes have the form
    ``salt:derived`` where both parts are hex; the hex salt string itself
    (not its decoded bytes) is the scrypt salt input.
    """

    def _derive(self, password: str, salt: str) -> str:
        return hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt.encode("utf-8"),
            n=SCRYPT_N,
            r=SCRYPT_R,
            p=SCRYPT_P,
            dklen=SCRYPT_DKLEN,
        ).hex()

    def hash_password(self, password: str) -> str:
        """Hash a password using scrypt.

        Args:
            password: Plain text password

        Returns:
            ``salt:hash`` string
        """
        salt = secrets.token_hex(SALT_BYTES)
        return f"{salt}:{self._derive(password, salt)}"

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against its stored ``salt:hash`` value.

        Malformed stored values never verify.
        """
        salt, sep, stored = (password_hash or "").partition(":")
        if not sep or not salt or not stored:
            return False
        try:
            computed = self._derive(password, salt)
        except (ValueError, MemoryError):
            return False
        return secrets.compare_digest(computed.encode("utf-8"), stored.lower().encode("utf-8"))

    def is_acceptable(self, password: str) -> bool:
        """Check the minimum password policy for new credentials."""
        return len(password) >= MIN_PASSWORD_LENGTH


# Singleton instance
_password_service: PasswordService | None = None


def get_password_service() -> PasswordService:
    """Get the password service singleton."""
    global _password_service
    if _password_service is None:
        _password_service = PasswordService()
    return _password_service
