"""Tests for utility functions."""

import pytest

from src.utils.address_utils import InvalidArgumentError, alias_from_address
from src.utils.text_utils import truncate_subject


class TestAliasFromAddress:
    """Test alias extraction from email addresses."""

    def test_alias_from_regular_address(self):
        """Test alias is the local part."""
        assert alias_from_address("jdoe@example.com") == "jdoe"

    def test_alias_stops_at_first_at_sign(self):
        """Test only the text before the first '@' is used."""
        assert alias_from_address("a@b@example.com") == "a"

    def test_alias_empty_local_part_falls_back(self):
        """Test address starting with '@' is returned unchanged."""
        assert alias_from_address("@example.com") == "@example.com"

    def test_alias_without_at_sign_falls_back(self):
        """Test address without '@' is returned unchanged."""
        assert alias_from_address("jdoe") == "jdoe"

    def test_alias_empty_string_raises_error(self):
        """Test empty address raises InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError):
            alias_from_address("")

    def test_alias_none_raises_error(self):
        """Test None address raises InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError):
            alias_from_address(None)

    def test_invalid_argument_is_value_error(self):
        """Test InvalidArgumentError can be caught as ValueError."""
        with pytest.raises(ValueError):
            alias_from_address("")


class TestTruncateSubject:
    """Test subject line truncation."""

    def test_truncate_short_subject(self):
        assert truncate_subject("Short subject", max_length=50) == "Short subject"

    def test_truncate_one_over_limit(self):
        """Test truncation when one character over limit."""
        result = truncate_subject("a" * 51, max_length=50)

        assert len(result) == 50
        assert result.endswith("...")

    def test_truncate_none_value(self):
        assert truncate_subject(None) == ""
