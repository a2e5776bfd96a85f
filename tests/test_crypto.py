"""Unit tests for auth/crypto.py -- password hashing and verification.

Covers:
- hash_password() is deterministic and returns a SHA-256 hex digest
- verify_password() accepts the right password and rejects others
- a failing digest primitive raises HashingError from hash()
- verify() never raises, even when the primitive fails
"""

from __future__ import annotations

import hashlib

import pytest

from auth.crypto import HashingError, PasswordHasher, hash_password, verify_password


def _broken_digest(text: str) -> str:
    raise OSError("digest primitive unavailable")


class TestHashPassword:
    def test_deterministic(self) -> None:
        assert hash_password("password123") == hash_password("password123")

    def test_is_sha256_hex(self) -> None:
        digest = hash_password("password123")
        assert digest == hashlib.sha256(b"password123").hexdigest()
        assert len(digest) == 64

    def test_never_returns_plaintext(self) -> None:
        assert hash_password("password123") != "password123"

    def test_unavailable_primitive_raises_hashing_error(self) -> None:
        hasher = PasswordHasher(digest=_broken_digest)
        with pytest.raises(HashingError):
            hasher.hash("password123")


class TestVerifyPassword:
    @pytest.mark.parametrize("password", ["password123", "abcdef", "pässwörd", " spaced "])
    def test_matches_own_hash(self, password: str) -> None:
        assert verify_password(password, hash_password(password))

    def test_rejects_other_password(self) -> None:
        assert not verify_password("wrong", hash_password("password123"))

    def test_rejects_garbage_digest(self) -> None:
        assert not verify_password("password123", "not-a-digest")

    def test_failing_primitive_is_a_mismatch(self) -> None:
        hasher = PasswordHasher(digest=_broken_digest)
        assert hasher.verify("password123", hash_password("password123")) is False
