"""
auth/errors.py -- Typed error taxonomy for auth operations.

Every failure the service raises is an AuthError carrying a stable code from
AuthErrorCode plus a developer-facing message. What the user sees is decided
at the presentation boundary: get_error_message(code) maps each code to
exactly one fixed message, so two failures with the same code always read the
same (INVALID_CREDENTIALS must not reveal whether the email exists).
"""

from __future__ import annotations

from enum import Enum


class AuthErrorCode(str, Enum):
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_EMAIL = "INVALID_EMAIL"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_NOT_FOUND = "USER_NOT_FOUND"  # reserved, no current flow raises it
    STORAGE_ERROR = "STORAGE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


AUTH_ERROR_MESSAGES: dict[AuthErrorCode, str] = {
    AuthErrorCode.MISSING_FIELDS: "Please fill in all required fields.",
    AuthErrorCode.INVALID_EMAIL: "Please enter a valid email address.",
    AuthErrorCode.WEAK_PASSWORD: "Password must be at least 6 characters long.",
    AuthErrorCode.EMAIL_ALREADY_EXISTS: "This email is already registered. Please login instead.",
    AuthErrorCode.INVALID_CREDENTIALS: "Incorrect email or password.",
    AuthErrorCode.USER_NOT_FOUND: "Account not found.",
    AuthErrorCode.STORAGE_ERROR: "Failed to save data. Please try again.",
    AuthErrorCode.UNKNOWN_ERROR: "An unexpected error occurred. Please try again.",
}


class AuthError(Exception):
    """Raised by AuthService for every expected failure."""

    def __init__(self, code: AuthErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = AuthErrorCode(code)
        self.message = message

    def __repr__(self) -> str:
        return f"AuthError({self.code.value!r}, {self.message!r})"


def get_error_message(code: AuthErrorCode | str) -> str:
    """Return the user-facing message for code. Unknown codes get the UNKNOWN_ERROR text."""
    try:
        return AUTH_ERROR_MESSAGES[AuthErrorCode(code)]
    except ValueError:
        return AUTH_ERROR_MESSAGES[AuthErrorCode.UNKNOWN_ERROR]
