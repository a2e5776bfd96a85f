"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container). Dataclasses own domain shape;
the repository and service do the work.

The to_dict / from_dict pairs are the only serialization logic here. They map
the snake_case attributes to the camelCase JSON keys used in the persisted
records ({id, name, email, passwordHash, createdAt} and {userId, createdAt}).

Layer rule: no imports from storage/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


def _require_id(data: dict, key: str) -> str:
    """Return data[key] if it is a non-empty string. Missing -> KeyError, anything else -> ValueError."""
    value = data[key]
    if not isinstance(value, str) or not value:
        raise ValueError(f"{key} must be a non-empty string, got {value!r}")
    return value


@dataclass
class User:
    """A registered local account.

    email is always the normalized form (trimmed + lowercased) and doubles as
    the lookup key. password_hash is the hex digest of the password, never the
    plaintext.
    """

    id: str  # UUID4, immutable
    name: str
    email: str
    password_hash: str
    created_at: str  # ISO 8601 UTC, immutable

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "passwordHash": self.password_hash,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> User:
        return cls(
            id=_require_id(data, "id"),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            password_hash=str(data.get("passwordHash") or ""),
            created_at=str(data.get("createdAt") or ""),
        )


@dataclass
class Session:
    """Pointer to the logged-in user. At most one exists at a time."""

    user_id: str
    created_at: str  # ISO 8601 UTC

    def to_dict(self) -> dict:
        return {"userId": self.user_id, "createdAt": self.created_at}

    @classmethod
    def from_dict(cls, data: dict) -> Session:
        return cls(user_id=_require_id(data, "userId"), created_at=str(data.get("createdAt") or ""))


@dataclass
class SignupCredentials:
    """Raw signup form input, before validation or sanitization."""

    name: str
    email: str
    password: str


@dataclass
class LoginCredentials:
    """Raw login form input, before validation or sanitization."""

    email: str
    password: str
