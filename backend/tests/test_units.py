"""
Unit tests for pure helpers: secret decoding, date arithmetic, LIKE escaping,
request validation messages.
"""

from datetime import datetime

import pytest
from fastapi import HTTPException

from app.core.security import SecretDecodeError, decode_secret, decode_secret_or_400
from app.routers.customers import escape_like
from app.services.lifecycle import add_years


class TestDecodeSecret:
    """Strict base64 decoding of write-only secrets."""

    def test_valid(self):
        assert decode_secret("aHVudGVyMg==") == b"hunter2"

    def test_surrounding_whitespace(self):
        assert decode_secret("  aHVudGVyMg==\n") == b"hunter2"

    @pytest.mark.parametrize("value", ["", "   ", "not base64!", "aGk", "%%%%"])
    def test_invalid(self, value):
        with pytest.raises(SecretDecodeError):
            decode_secret(value)

    def test_or_400_passes_none_through(self):
        assert decode_secret_or_400(None, "password") is None

    def test_or_400_raises_bad_request(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_secret_or_400("***", "fingerprint")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid Base64 encoding for fingerprint"


class TestAddYears:
    """Expiration arithmetic."""

    def test_plain(self):
        assert add_years(datetime(2024, 3, 15, 12, 30), 2) == datetime(2026, 3, 15, 12, 30)

    def test_zero(self):
        moment = datetime(2024, 3, 15)
        assert add_years(moment, 0) == moment

    def test_leap_day_falls_back(self):
        assert add_years(datetime(2024, 2, 29, 8, 0), 1) == datetime(2025, 2, 28, 8, 0)

    def test_leap_day_to_leap_year(self):
        assert add_years(datetime(2024, 2, 29), 4) == datetime(2028, 2, 29)


class TestEscapeLike:
    """LIKE wildcard escaping for the business name filter."""

    def test_plain_text_unchanged(self):
        assert escape_like("Acme") == "Acme"

    def test_wildcards(self):
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_backslash(self):
        assert escape_like("a\\b") == "a\\\\b"
