"""
auth/repository.py -- Typed async accessors over the key-value store.

Pattern: Repository + Data Mapper. AuthRepository is the repository for the
two auth records; User.from_dict / Session.from_dict are the mappers. The
service never touches storage keys or JSON directly.

Persisted records (keys are versioned so a future format can migrate):
  AUTH_USERS_V1    JSON list of {id, name, email, passwordHash, createdAt}
  AUTH_SESSION_V1  JSON {userId, createdAt}, absent when logged out

Concurrency:
  KeyValueStore is blocking, so every call runs in a worker thread via
  asyncio.to_thread. The user collection is read-modify-written as a whole,
  and the session lives in a single fixed slot, so writers are serialized
  through one asyncio.Lock per repository. Reads do not take the lock.

Errors: StorageError from the store propagates unchanged. No retries; the
service decides what a failure means.

Layer rule: imports storage/ but not core/config directly.
"""

from __future__ import annotations

import asyncio
import logging

from auth.models import Session, User
from storage.store import KeyValueStore

logger = logging.getLogger("localauth.auth.repository")

USERS_KEY = "AUTH_USERS_V1"
SESSION_KEY = "AUTH_SESSION_V1"


class DuplicateEmailError(Exception):
    """add_user() found a stored user with the same email while holding the write lock."""


class AuthRepository:
    """Async repository for the user collection and the current session.

    Usage:
        repo = AuthRepository(KeyValueStore())
        await repo.add_user(user)
        found = await repo.find_user_by_email("john@example.com")
        await repo.save_session(Session(user_id=found.id, created_at=now))
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def list_users(self) -> list[User]:
        """Return every stored user in insertion order. Missing collection -> []."""
        raw = await asyncio.to_thread(self.store.get, USERS_KEY)
        return _decode_users(raw)

    async def save_users(self, users: list[User]) -> None:
        """Replace the whole user collection."""
        async with self._write_lock:
            await self._write_users(users)

    async def find_user_by_email(self, email: str) -> User | None:
        """Return the first user whose stored email equals email (already normalized)."""
        for user in await self.list_users():
            if user.email == email:
                return user
        return None

    async def find_user_by_id(self, user_id: str) -> User | None:
        for user in await self.list_users():
            if user.id == user_id:
                return user
        return None

    async def add_user(self, user: User) -> None:
        """Append user to the collection: load all, append, persist all.

        The email uniqueness check runs inside the same critical section as
        the write, so two concurrent adds for one email cannot both land.
        Raises DuplicateEmailError in that case. Either the whole new
        collection is written or nothing is; a failed write leaves the stored
        collection as it was.
        """
        async with self._write_lock:
            users = await self.list_users()
            if any(existing.email == user.email for existing in users):
                raise DuplicateEmailError(user.email)
            users.append(user)
            await self._write_users(users)
        logger.debug("User %s added (%d total)", user.id, len(users))

    async def _write_users(self, users: list[User]) -> None:
        await asyncio.to_thread(self.store.set, USERS_KEY, [u.to_dict() for u in users])

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def get_session(self) -> Session | None:
        raw = await asyncio.to_thread(self.store.get, SESSION_KEY)
        if raw is None:
            return None
        try:
            return Session.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Ignoring malformed session record under %s", SESSION_KEY)
            return None

    async def save_session(self, session: Session) -> None:
        """Write session to the single session slot, replacing any previous one."""
        async with self._write_lock:
            await asyncio.to_thread(self.store.set, SESSION_KEY, session.to_dict())

    async def clear_session(self) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self.store.remove, SESSION_KEY)


# ---------------------------------------------------------------------------
# Mappers
# ---------------------------------------------------------------------------


def _decode_users(raw) -> list[User]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Ignoring malformed user collection under %s", USERS_KEY)
        return []
    users: list[User] = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed user record in %s", USERS_KEY)
            continue
        try:
            users.append(User.from_dict(entry))
        except (KeyError, ValueError):
            logger.warning("Skipping malformed user record in %s", USERS_KEY)
    return users
