"""Value validators for service parameter schemas.

Every validator has the signature ``validate(value, key) -> List[str]`` and
returns a list of validation errors (empty if valid).
"""

import re
from typing import Any, Callable, Iterable, List

Validator = Callable[[Any, str], List[str]]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_float(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def int_between(minimum: int, maximum: int) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if not _is_int(value):
            return [f"expected type of {key} to be integer"]
        if value < minimum or value > maximum:
            return [f"expected {key} to be in the range ({minimum} - {maximum}), got {value}"]
        return []

    return validate


def int_at_least(minimum: int) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if not _is_int(value):
            return [f"expected type of {key} to be integer"]
        if value < minimum:
            return [f"expected {key} to be at least ({minimum}), got {value}"]
        return []

    return validate


def int_in_slice(valid: Iterable[int]) -> Validator:
    valid = list(valid)

    def validate(value: Any, key: str) -> List[str]:
        if not _is_int(value):
            return [f"expected type of {key} to be integer"]
        if value not in valid:
            return [f"expected {key} to be one of {valid}, got {value}"]
        return []

    return validate


def int_divisible_by(divisor: int) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if not _is_int(value):
            return [f"expected type of {key} to be integer"]
        if value % divisor != 0:
            return [f"expected {key} to be divisible by {divisor}, got: {value}"]
        return []

    return validate


def float_between(minimum: float, maximum: float) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if not _is_float(value):
            return [f"expected type of {key} to be float"]
        if value < minimum or value > maximum:
            return [f"expected {key} to be in the range ({minimum} - {maximum}), got {value}"]
        return []

    return validate


def float_at_least(minimum: float) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if not _is_float(value):
            return [f"expected type of {key} to be float"]
        if value < minimum:
            return [f"expected {key} to be at least ({minimum}), got {value}"]
        return []

    return validate


def string_in_slice(valid: Iterable[str], ignore_case: bool = False) -> Validator:
    valid = list(valid)

    def validate(value: Any, key: str) -> List[str]:
        if not isinstance(value, str):
            return [f"expected type of {key} to be string"]
        for candidate in valid:
            if value == candidate or (ignore_case and value.lower() == candidate.lower()):
                return []
        return [f"expected {key} to be one of {valid}, got {value}"]

    return validate


def string_len_between(minimum: int, maximum: int) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if not isinstance(value, str):
            return [f"expected type of {key} to be string"]
        if len(value) < minimum or len(value) > maximum:
            return [f"expected length of {key} to be in the range ({minimum} - {maximum}), got {value}"]
        return []

    return validate


def string_matches(pattern: str, message: str = "") -> Validator:
    regex = re.compile(pattern)

    def validate(value: Any, key: str) -> List[str]:
        if not isinstance(value, str):
            return [f"expected type of {key} to be string"]
        if not regex.search(value):
            if message:
                return [f"invalid value for {key} ({message})"]
            return [f"invalid value for {key}: must match {pattern!r}, got {value}"]
        return []

    return validate


def string_does_not_contain_any(chars: str) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if not isinstance(value, str):
            return [f"expected type of {key} to be string"]
        for char in chars:
            if char in value:
                return [f"expected value of {key} to not contain any of {chars!r}, got {value}"]
        return []

    return validate


def all_of(*validators: Validator) -> Validator:
    """Collect the errors of every validator."""
    def validate(value: Any, key: str) -> List[str]:
        errors = []
        for validator in validators:
            errors.extend(validator(value, key))
        return errors

    return validate


def any_of(*validators: Validator) -> Validator:
    """Pass if at least one validator passes."""
    def validate(value: Any, key: str) -> List[str]:
        errors = []
        for validator in validators:
            result = validator(value, key)
            if not result:
                return []
            errors.extend(result)
        return errors

    return validate
