"""User account model for the JSON user store."""

import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_user_id() -> str:
    """Generate an opaque user id: ``u_<base36 millis>_<6 random chars>``."""
    millis = _to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"u_{millis}_{suffix}"


@dataclass
class ProviderLink:
    """An external identity linked to a user."""

    provider: str
    provider_user_id: str

    def matches(self, provider: str, provider_user_id: str) -> bool:
        return self.provider == provider and self.provider_user_id == provider_user_id

    def to_dict(self) -> dict[str, Any]:
        return {"provider": self.provider, "providerUserId": self.provider_user_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProviderLink":
        return cls(
            provider=str(data["provider"]),
            provider_user_id=str(data["providerUserId"]),
        )


@dataclass
class User:
    """User account.

    A user can be linked to several providers (Google, Apple, Facebook,
    email). ``password_hash`` is only set once an email/password credential
    has been registered.
    """

    user_id: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None
    providers: list[ProviderLink] = field(default_factory=list)
    password_hash: str | None = None
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )

    def has_link(self, provider: str, provider_user_id: str) -> bool:
        return any(link.matches(provider, provider_user_id) for link in self.providers)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the on-disk (camelCase) field names."""
        data: dict[str, Any] = {
            "userId": self.user_id,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "providers": [link.to_dict() for link in self.providers],
            "createdAt": self.created_at,
        }
        if self.password_hash:
            data["passwordHash"] = self.password_hash
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            user_id=str(data["userId"]),
            email=data.get("email") or None,
            name=data.get("name") or None,
            picture=data.get("picture") or None,
            providers=[ProviderLink.from_dict(p) for p in data.get("providers", [])],
            password_hash=data.get("passwordHash") or None,
            created_at=data.get("createdAt") or "",
        )

    def __repr__(self) -> str:
        return f"<User {self.user_id} email={self.email}>"
