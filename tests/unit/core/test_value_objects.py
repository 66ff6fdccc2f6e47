"""
Unit tests for core value objects.
"""
import pytest

from core.domain.exceptions import EmailMissingError
from core.domain.value_objects import Email


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("test@example.com")
        assert str(email) == "test@example.com"
        assert email.value == "test@example.com"

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")

    def test_rejects_unnormalized_value(self):
        with pytest.raises(ValueError, match="not normalized"):
            Email("User@Example.com")

    def test_normalize_trims_and_lowercases(self):
        assert Email.normalize("  User@Example.COM ") == Email("user@example.com")

    @pytest.mark.parametrize("raw", [None, "", "   ", "no-at-sign"])
    def test_normalize_rejects_missing_email(self, raw):
        with pytest.raises(EmailMissingError):
            Email.normalize(raw)

    def test_equal_emails_hash_alike(self):
        assert len({Email("a@example.com"), Email.normalize("A@example.com")}) == 1
