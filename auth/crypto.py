"""
auth/crypto.py -- Password hashing and verification.

Security design decisions:
  Digest: SHA-256 over the UTF-8 password, hex encoded. The hash must be
       deterministic -- verify_password() recomputes the digest of the
       candidate and compares it to the stored one -- so salted schemes
       (bcrypt, argon2) do not fit this contract. The store is local to one
       device; there is no network attacker to time comparisons against.

  Failure modes: hash_password() raises HashingError when the digest
       primitive fails, because signup cannot continue without a hash.
       verify_password() never raises: any internal failure is a plain
       "does not match" so a caller cannot tell a broken primitive from a
       wrong password.

The digest primitive is injectable (PasswordHasher(digest=...)) so tests can
simulate an unavailable primitive without patching hashlib.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable

logger = logging.getLogger("localauth.auth.crypto")


class HashingError(RuntimeError):
    """The digest primitive could not produce a hash (HASH_FAILURE)."""


def sha256_digest(text: str) -> str:
    """Return the SHA-256 hex digest of text encoded as UTF-8."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class PasswordHasher:
    """Wraps a one-way digest function as hash/verify."""

    def __init__(self, digest: Callable[[str], str] = sha256_digest) -> None:
        self._digest = digest

    def hash(self, password: str) -> str:
        try:
            return self._digest(password)
        except Exception as exc:
            raise HashingError("Failed to hash password") from exc

    def verify(self, password: str, digest: str) -> bool:
        """Return True if password hashes to digest. Any failure counts as a mismatch."""
        try:
            return self.hash(password) == digest
        except Exception:
            logger.debug("Password verification failed internally", exc_info=True)
            return False


_default_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _default_hasher.hash(password)


def verify_password(password: str, digest: str) -> bool:
    return _default_hasher.verify(password, digest)
