"""Unit tests for auth/validators.py and auth/sanitizers.py.

Covers:
- required() treats whitespace-only input as empty
- is_valid_email() accepts local@domain.tld and rejects partial shapes
- is_strong_enough_password() uses raw length with a minimum of 6
- normalize_email() trims, lowercases and is idempotent
- sanitize_name() / sanitize_email() charset and length bounds
- is_within_length() uses trimmed length, inclusive bounds
"""

from __future__ import annotations

import pytest

from auth.sanitizers import is_within_length, sanitize_email, sanitize_name
from auth.validators import is_strong_enough_password, is_valid_email, normalize_email, required

_NAME_ALLOWED = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 -'")


class TestRequired:
    def test_non_empty(self) -> None:
        assert required("hello")
        assert required("test@example.com")

    def test_surrounding_whitespace_is_still_present(self) -> None:
        assert required("  hello  ")

    @pytest.mark.parametrize("value", ["", "   ", "\t", "\n"])
    def test_empty_or_whitespace(self, value: str) -> None:
        assert not required(value)


class TestIsValidEmail:
    @pytest.mark.parametrize("value", ["user@example.com", "test.user@example.com", "user+tag@example.co.uk"])
    def test_valid(self, value: str) -> None:
        assert is_valid_email(value)

    @pytest.mark.parametrize("value", ["notanemail", "@example.com", "user@", "user@domain", "", "   "])
    def test_invalid(self, value: str) -> None:
        assert not is_valid_email(value)

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        assert is_valid_email("  user@example.com  ")

    def test_embedded_whitespace_rejected(self) -> None:
        assert not is_valid_email("us er@example.com")


class TestIsStrongEnoughPassword:
    def test_exactly_six(self) -> None:
        assert is_strong_enough_password("abcdef")

    @pytest.mark.parametrize("value", ["12345", "abc", "a", ""])
    def test_too_short(self, value: str) -> None:
        assert not is_strong_enough_password(value)

    def test_raw_length_counts_whitespace(self) -> None:
        """Strength is measured on the raw value: spaces count toward the minimum."""
        assert is_strong_enough_password("  ab  ")


class TestNormalizeEmail:
    def test_lowercases_and_trims(self) -> None:
        assert normalize_email("  USER@EXAMPLE.COM  ") == "user@example.com"
        assert normalize_email("\tuser@example.com\n") == "user@example.com"

    def test_preserves_plus_tag(self) -> None:
        assert normalize_email("user+tag@example.com") == "user+tag@example.com"

    @pytest.mark.parametrize("value", ["A@B.com", " a@b.com ", "MiXeD@Case.ORG\t", ""])
    def test_idempotent(self, value: str) -> None:
        once = normalize_email(value)
        assert normalize_email(once) == once


class TestSanitizeName:
    def test_strips_markup_and_collapses_whitespace(self) -> None:
        result = sanitize_name("  John   <script>Cena</script>  ")
        assert set(result) <= _NAME_ALLOWED
        assert "  " not in result
        assert result.startswith("John ")
        assert len(result) <= 100

    def test_keeps_hyphen_and_apostrophe(self) -> None:
        assert sanitize_name("Mary-Jane O'Neil") == "Mary-Jane O'Neil"

    def test_truncates_after_cleaning(self) -> None:
        """Disallowed characters do not count toward the 100-char cap."""
        raw = "!" * 50 + "a" * 120
        assert sanitize_name(raw) == "a" * 100

    def test_only_disallowed_characters_yields_empty(self) -> None:
        assert sanitize_name("<>!@#") == ""


class TestSanitizeEmail:
    def test_lowercases_and_strips(self) -> None:
        assert sanitize_email("  JOHN@EXAMPLE.COM ") == "john@example.com"

    def test_removes_disallowed_characters(self) -> None:
        assert sanitize_email("jo hn<>@exa(mple).com") == "john@example.com"

    def test_keeps_allowed_symbols(self) -> None:
        assert sanitize_email("first.last+tag_x-y@example.com") == "first.last+tag_x-y@example.com"

    def test_truncates_to_254(self) -> None:
        raw = "a" * 300 + "@example.com"
        assert len(sanitize_email(raw)) == 254


class TestIsWithinLength:
    def test_inclusive_bounds(self) -> None:
        assert is_within_length("a", 1, 3)
        assert is_within_length("abc", 1, 3)

    def test_out_of_bounds(self) -> None:
        assert not is_within_length("", 1, 3)
        assert not is_within_length("abcd", 1, 3)

    def test_uses_trimmed_length(self) -> None:
        assert not is_within_length("   ", 1, 3)
        assert is_within_length("  ab  ", 1, 2)
