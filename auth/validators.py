"""
auth/validators.py -- Pure predicates over raw form strings.

No side effects, no I/O. The email check is deliberately loose: it only
requires something@something.something with no whitespace, not RFC 5322.
"""

from __future__ import annotations

import re

MIN_PASSWORD_LENGTH = 6

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def required(value: str) -> bool:
    """True if value is non-empty after trimming whitespace."""
    return len(value.strip()) > 0


def is_valid_email(value: str) -> bool:
    if not required(value):
        return False
    return _EMAIL_RE.match(value.strip()) is not None


def is_strong_enough_password(value: str) -> bool:
    """True if the raw (untrimmed) password is at least MIN_PASSWORD_LENGTH long."""
    return len(value) >= MIN_PASSWORD_LENGTH


def normalize_email(value: str) -> str:
    """Canonical lookup form of an email: trimmed and lowercased. Idempotent."""
    return value.strip().lower()
