"""Tests for tri-state string encodings."""

import pytest

from paas_provider.services.nullable import (
    NullableBool,
    NullableInt,
    validate_nullable_bool,
    validate_nullable_int,
    validate_nullable_int_at_least,
)


class TestNullableBool:
    """Test nullable bool parsing."""

    def test_empty_is_null(self):
        """Test the empty string means null."""
        value = NullableBool("")

        assert value.is_null()
        assert value.value() == (False, True)

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("TRUE", True),
        ("1", True),
        ("false", False),
        ("0", False),
        ("f", False),
    ])
    def test_parse(self, raw, expected):
        """Test accepted spellings."""
        assert NullableBool(raw).value() == (expected, False)

    def test_invalid_value(self):
        """Test unparseable strings raise ValueError."""
        with pytest.raises(ValueError):
            NullableBool("maybe").value()

    def test_from_bool(self):
        """Test encoding bools and None."""
        assert NullableBool.from_bool(True) == "true"
        assert NullableBool.from_bool(False) == "false"
        assert NullableBool.from_bool(None) == ""

    def test_validate(self):
        """Test the schema validator."""
        assert validate_nullable_bool("", "flag") == []
        assert validate_nullable_bool("true", "flag") == []
        assert validate_nullable_bool(True, "flag") == ["expected type of flag to be string"]
        assert len(validate_nullable_bool("yes please", "flag")) == 1


class TestNullableInt:
    """Test nullable int parsing."""

    def test_empty_is_null(self):
        """Test the empty string means null."""
        assert NullableInt("").value() == (0, True)

    def test_parse(self):
        """Test decimal strings parse, including zero."""
        assert NullableInt("0").value() == (0, False)
        assert NullableInt("-12").value() == (-12, False)

    def test_invalid_value(self):
        """Test unparseable strings raise ValueError."""
        with pytest.raises(ValueError):
            NullableInt("ten").value()

    def test_from_int(self):
        """Test encoding ints and None."""
        assert NullableInt.from_int(0) == "0"
        assert NullableInt.from_int(None) == ""

    def test_validate_at_least(self):
        """Test the lower bound validator ignores null."""
        validate = validate_nullable_int_at_least(1)

        assert validate("", "count") == []
        assert validate("5", "count") == []
        assert validate("0", "count") == ["expected count to be at least (1), got 0"]
        assert validate_nullable_int("x", "count") == ["count: cannot parse 'x' as int"]
