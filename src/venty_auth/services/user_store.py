"""JSON-file user store.

All users live in one JSON array that is rewritten after every mutation.
Read-modify-write cycles are serialized per file with a process-wide lock,
and writes go through a temp file + ``os.replace`` so readers never observe
a half-written file.
"""

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path

from venty_auth.errors import ConflictError, StoreCorruptedError
from venty_auth.models.user import ProviderLink, User, generate_user_id
from venty_auth.services.identity_service import Identity, normalize_email

logger = logging.getLogger(__name__)

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


class UserStore:
    """Repository of user records backed by a single JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> list[User]:
        """Load all users.

        A missing file is an empty store. A file that exists but does not
        hold a JSON array of user records raises StoreCorruptedError rather
        than being treated as empty.
        """
        if not self.path.exists():
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreCorruptedError(f"Cannot read user store {self.path}: {e}") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(f"User store {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise StoreCorruptedError(f"User store {self.path} must contain a JSON array")

        try:
            users = [User.from_dict(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise StoreCorruptedError(f"User store {self.path} has a malformed record: {e}") from e

        # Older files kept emails exactly as received
        for user in users:
            user.email = normalize_email(user.email)
        return users

    def save(self, users: list[User]) -> None:
        """Rewrite the whole store atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([user.to_dict() for user in users], indent=2)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # =========================================================================
    # Queries
    # =========================================================================

    def find(self, predicate: Callable[[User], bool]) -> User | None:
        """Return the first user matching the predicate (linear scan)."""
        return next((user for user in self.load() if predicate(user)), None)

    def get(self, user_id: str) -> User | None:
        return self.find(lambda u: u.user_id == user_id)

    def find_by_email(self, email: str, require_password: bool = False) -> User | None:
        """First user with this email, optionally only one holding a password."""
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.find(
            lambda u: u.email == normalized and (not require_password or bool(u.password_hash))
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def upsert_from_identity(self, identity: Identity) -> User:
        """Resolve an identity to a user, linking or creating as needed.

        - A user matches if it has the identity's email (when the identity
          carries one) or already holds the ``(provider, provider_id)`` link.
        - On a match the link is appended if missing and empty profile
          fields are backfilled; non-empty fields are never overwritten.
        - Otherwise a new user is created with this single link.
        """
        with self._lock:
            users = self.load()
            user = self._upsert(users, identity)
            self.save(users)
            return user

    def register_password(self, identity: Identity, password_hash: str) -> User:
        """Attach an email/password credential, creating the user if needed.

        Raises:
            ConflictError: If a user with this email already has a password
        """
        with self._lock:
            users = self.load()
            if identity.email and any(
                u.email == identity.email and u.password_hash for u in users
            ):
                raise ConflictError("email_exists", "Email already has a password credential")

            user = self._upsert(users, identity)
            user.password_hash = password_hash
            self.save(users)
            return user

    def _upsert(self, users: list[User], identity: Identity) -> User:
        user = next(
            (
                u
                for u in users
                if (identity.email and u.email == identity.email)
                or u.has_link(identity.provider, identity.provider_id)
            ),
            None,
        )

        if user is None:
            existing_ids = {u.user_id for u in users}
            user_id = generate_user_id()
            while user_id in existing_ids:
                user_id = generate_user_id()

            user = User(
                user_id=user_id,
                email=identity.email,
                name=identity.name,
                picture=identity.picture,
                providers=[ProviderLink(identity.provider, identity.provider_id)],
            )
            users.append(user)
            logger.info(f"Created user {user.user_id} via {identity.provider}")
            return user

        if not user.has_link(identity.provider, identity.provider_id):
            user.providers.append(ProviderLink(identity.provider, identity.provider_id))
            logger.info(f"Linked {identity.provider} identity to user {user.user_id}")

        if identity.email and not user.email:
            user.email = identity.email
        if identity.name and not user.name:
            user.name = identity.name
        if identity.picture and not user.picture:
            user.picture = identity.picture

        return user
