"""
auth/service.py -- Business logic for signup, login, logout and bootstrap.

AuthService orchestrates validators, sanitizers, the password hasher and the
repository. It holds no user state between calls: every operation reads what
it needs from the repository and returns a fresh User.

Failure ordering:
  Checks run in a fixed order and the first failing check raises. Validation
  failures never reach storage. Storage failures on writes are re-raised as
  AuthError(STORAGE_ERROR); the underlying cause is logged, not returned.

Credential privacy:
  login() raises the same INVALID_CREDENTIALS error (same code, same message)
  for an unknown email and for a wrong password, so the caller cannot tell
  which emails are registered.

Bootstrap:
  bootstrap() is best-effort and never raises. Any fault degrades to "not
  logged in" and the session slot is cleared so the next start is clean.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from auth.crypto import HashingError, PasswordHasher
from auth.errors import AuthError, AuthErrorCode
from auth.models import LoginCredentials, Session, SignupCredentials, User
from auth.repository import AuthRepository, DuplicateEmailError
from auth.sanitizers import NAME_MAX_LENGTH, is_within_length, sanitize_email, sanitize_name
from auth.validators import is_strong_enough_password, is_valid_email, normalize_email, required
from storage.store import StorageError

logger = logging.getLogger("localauth.auth")


def _generate_id() -> str:
    return str(uuid.uuid4())


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuthService:
    """Signup/login/logout/bootstrap over an AuthRepository.

    Usage:
        service = AuthService(AuthRepository(KeyValueStore()))
        user = await service.signup("John Cena", "john@example.com", "password123")
        user = await service.login("john@example.com", "password123")
        await service.logout()
        user = await service.bootstrap()   # User or None
    """

    def __init__(self, repository: AuthRepository, hasher: PasswordHasher | None = None) -> None:
        self.repository = repository
        self.hasher = hasher or PasswordHasher()

    # ------------------------------------------------------------------
    # Signup
    # ------------------------------------------------------------------

    async def signup(self, name: str, email: str, password: str) -> User:
        """Register a new user and log them in. Returns the created User."""
        if not required(name) or not required(email) or not required(password):
            raise AuthError(AuthErrorCode.MISSING_FIELDS, "All fields are required")

        sanitized_name = sanitize_name(name)
        sanitized_email = sanitize_email(email)

        # Name-length failures carry INVALID_EMAIL; there is no INVALID_NAME code.
        if not is_within_length(sanitized_name, 1, NAME_MAX_LENGTH):
            raise AuthError(AuthErrorCode.INVALID_EMAIL, "Name must be between 1 and 100 characters")

        if not is_valid_email(sanitized_email):
            raise AuthError(AuthErrorCode.INVALID_EMAIL, "Invalid email format")

        if not is_strong_enough_password(password):
            raise AuthError(AuthErrorCode.WEAK_PASSWORD, "Password must be at least 6 characters")

        normalized_email = normalize_email(sanitized_email)

        if await self.repository.find_user_by_email(normalized_email) is not None:
            raise AuthError(AuthErrorCode.EMAIL_ALREADY_EXISTS, "Email already registered")

        try:
            password_hash = self.hasher.hash(password)
        except HashingError as exc:
            logger.error("Password hashing unavailable during signup: %s", exc.__cause__ or exc)
            raise AuthError(AuthErrorCode.UNKNOWN_ERROR, "Failed to hash password") from None

        user = User(
            id=_generate_id(),
            name=sanitized_name,
            email=normalized_email,
            password_hash=password_hash,
            created_at=_now_iso(),
        )

        try:
            await self.repository.add_user(user)
        except DuplicateEmailError:
            logger.info("Concurrent signup already registered %s", normalized_email)
            raise AuthError(AuthErrorCode.EMAIL_ALREADY_EXISTS, "Email already registered") from None
        except StorageError as exc:
            logger.error("Could not save new user %s: %s", normalized_email, exc)
            raise AuthError(AuthErrorCode.STORAGE_ERROR, "Failed to save user") from None

        await self._start_session(user)
        logger.info("User %s signed up", normalized_email)
        return user

    async def signup_with(self, credentials: SignupCredentials) -> User:
        return await self.signup(credentials.name, credentials.email, credentials.password)

    # ------------------------------------------------------------------
    # Login / logout
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> User:
        """Authenticate email/password and start a session. Returns the User."""
        if not required(email) or not required(password):
            raise AuthError(AuthErrorCode.MISSING_FIELDS, "Email and password are required")

        sanitized_email = sanitize_email(email)
        if not is_valid_email(sanitized_email):
            raise AuthError(AuthErrorCode.INVALID_EMAIL, "Invalid email format")
        normalized_email = normalize_email(sanitized_email)

        user = await self.repository.find_user_by_email(normalized_email)
        if user is None:
            logger.info("Login failed for %s", normalized_email)
            raise AuthError(AuthErrorCode.INVALID_CREDENTIALS, "Invalid email or password")

        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login failed for %s", normalized_email)
            raise AuthError(AuthErrorCode.INVALID_CREDENTIALS, "Invalid email or password")

        await self._start_session(user)
        logger.info("User %s logged in", normalized_email)
        return user

    async def login_with(self, credentials: LoginCredentials) -> User:
        return await self.login(credentials.email, credentials.password)

    async def logout(self) -> None:
        """Clear the persisted session."""
        try:
            await self.repository.clear_session()
        except StorageError as exc:
            logger.error("Could not clear session: %s", exc)
            raise AuthError(AuthErrorCode.STORAGE_ERROR, "Failed to clear session") from None
        logger.info("Session cleared")

    async def _start_session(self, user: User) -> None:
        session = Session(user_id=user.id, created_at=_now_iso())
        try:
            await self.repository.save_session(session)
        except StorageError as exc:
            logger.error("Could not save session for user %s: %s", user.id, exc)
            raise AuthError(AuthErrorCode.STORAGE_ERROR, "Failed to save session") from None

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    async def bootstrap(self) -> User | None:
        """Restore the previous session at startup. Returns the User or None, never raises."""
        try:
            session = await self.repository.get_session()
            if session is None:
                return None

            user = await self.repository.find_user_by_id(session.user_id)
            if user is None:
                logger.warning("Session references missing user %s; clearing it", session.user_id)
                await self.repository.clear_session()
                return None

            logger.info("Restored session for %s", user.email)
            return user
        except Exception:
            logger.exception("Bootstrap failed; continuing logged out")
            await self._discard_session()
            return None

    async def current_user(self) -> User | None:
        """The logged-in user, or None. Same recovery rules as bootstrap()."""
        return await self.bootstrap()

    async def _discard_session(self) -> None:
        try:
            await self.repository.clear_session()
        except Exception:
            logger.warning("Could not clear session after bootstrap failure", exc_info=True)
