"""
auth/sanitizers.py -- Input sanitization for signup/login form fields.

Each function is a fixed pipeline of string transforms. Order matters:
truncation always runs last, so the length bound applies to the cleaned
string rather than the raw input.
"""

from __future__ import annotations

import re

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 254  # RFC 5321 path limit

_WHITESPACE_RUN_RE = re.compile(r"\s+")
_NAME_DISALLOWED_RE = re.compile(r"[^a-zA-Z0-9\s'-]")
_EMAIL_DISALLOWED_RE = re.compile(r"[^a-z0-9@._+-]")


def sanitize_name(value: str) -> str:
    """Trim, collapse whitespace, keep letters/digits/space/hyphen/apostrophe, cap at 100 chars."""
    name = value.strip()
    name = _WHITESPACE_RUN_RE.sub(" ", name)
    name = _NAME_DISALLOWED_RE.sub("", name)
    return name[:NAME_MAX_LENGTH]


def sanitize_email(value: str) -> str:
    """Trim, lowercase, keep [a-z0-9@._+-], cap at 254 chars."""
    email = value.strip().lower()
    email = _EMAIL_DISALLOWED_RE.sub("", email)
    return email[:EMAIL_MAX_LENGTH]


def is_within_length(value: str, min_len: int, max_len: int) -> bool:
    """True if the trimmed length of value lies in [min_len, max_len]."""
    return min_len <= len(value.strip()) <= max_len
