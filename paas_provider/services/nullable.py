"""Tri-state values encoded as strings.

Some parameters need to distinguish "not set" from their zero value. They are
declared as strings where ``""`` means null and any other value is parsed.
"""

from typing import Any, List, Optional, Tuple, Callable


class NullableBool(str):
    """Boolean that may be null, encoded as ``""``, ``"true"`` or ``"false"``."""

    _TRUE = ("true", "1", "t")
    _FALSE = ("false", "0", "f")

    def is_null(self) -> bool:
        return self == ""

    def value(self) -> Tuple[bool, bool]:
        """Return ``(value, is_null)``.

        Raises:
            ValueError: if the string is not a boolean.
        """
        if self.is_null():
            return False, True

        lowered = self.lower()
        if lowered in self._TRUE:
            return True, False
        if lowered in self._FALSE:
            return False, False

        raise ValueError(f"cannot parse '{self}' as bool")

    @classmethod
    def from_bool(cls, value: Optional[bool]) -> 'NullableBool':
        if value is None:
            return cls("")
        return cls("true" if value else "false")


class NullableInt(str):
    """Integer that may be null, encoded as ``""`` or a decimal string."""

    def is_null(self) -> bool:
        return self == ""

    def value(self) -> Tuple[int, bool]:
        """Return ``(value, is_null)``.

        Raises:
            ValueError: if the string is not an integer.
        """
        if self.is_null():
            return 0, True

        return int(self, 10), False

    @classmethod
    def from_int(cls, value: Optional[int]) -> 'NullableInt':
        if value is None:
            return cls("")
        return cls(str(value))


def validate_nullable_bool(value: Any, key: str) -> List[str]:
    """Validate that a value is a string holding a bool or nothing."""
    if not isinstance(value, str):
        return [f"expected type of {key} to be string"]

    try:
        NullableBool(value).value()
    except ValueError as e:
        return [f"{key}: {e}"]

    return []


def validate_nullable_int(value: Any, key: str) -> List[str]:
    """Validate that a value is a string holding an int or nothing."""
    if not isinstance(value, str):
        return [f"expected type of {key} to be string"]

    try:
        NullableInt(value).value()
    except ValueError:
        return [f"{key}: cannot parse '{value}' as int"]

    return []


def validate_nullable_int_at_least(minimum: int) -> Callable[[Any, str], List[str]]:
    """Validator for nullable ints with a lower bound."""
    def validate(value: Any, key: str) -> List[str]:
        errors = validate_nullable_int(value, key)
        if errors or value == "":
            return errors

        parsed, _ = NullableInt(value).value()
        if parsed < minimum:
            return [f"expected {key} to be at least ({minimum}), got {parsed}"]
        return []

    return validate
