"""Declarative configuration shapes and their validation.

A shape is a ``Dict[str, Attribute]``. Nested blocks are list or set
attributes whose ``elem`` is itself a shape; primitive collections have an
``Attribute`` as their ``elem``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

from paas_provider.services.validation import Validator


class AttributeType(str, Enum):
    """Value types an attribute can hold."""
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    SET = "set"
    MAP = "map"


@dataclass
class Attribute:
    """Single attribute of a configuration shape."""
    type: AttributeType
    optional: bool = False
    required: bool = False
    computed: bool = False
    sensitive: bool = False
    force_new: bool = False
    default: Any = None
    validators: Tuple[Validator, ...] = ()
    max_items: int = 0
    elem: Union['Attribute', Dict[str, 'Attribute'], None] = None
    exactly_one_of: Tuple[str, ...] = ()
    conflicts_with: Tuple[str, ...] = ()
    required_with: Tuple[str, ...] = ()
    description: str = ""

    def is_block(self) -> bool:
        return self.type in (AttributeType.LIST, AttributeType.SET) and isinstance(self.elem, dict)

    @property
    def block(self) -> Dict[str, 'Attribute']:
        """Nested shape of a block attribute."""
        if not self.is_block():
            raise TypeError(f"attribute of type {self.type.value} is not a block")
        return self.elem


@dataclass
class Shape:
    """Named top-level shape, used for resources and data sources."""
    attributes: Dict[str, Attribute] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Attribute:
        return self.attributes[key]

    def __contains__(self, key: str) -> bool:
        return key in self.attributes


def is_set(value: Any) -> bool:
    """Return True if a config value counts as set."""
    if value is None:
        return False
    if isinstance(value, (list, tuple, set, frozenset, dict)) and len(value) == 0:
        return False
    return True


_PRIMITIVE_TYPES = {
    AttributeType.BOOL: (bool,),
    AttributeType.INT: (int,),
    AttributeType.FLOAT: (int, float),
    AttributeType.STRING: (str,),
}


def _check_primitive(attr: Attribute, value: Any, key: str) -> List[str]:
    expected = _PRIMITIVE_TYPES[attr.type]
    if attr.type != AttributeType.BOOL and isinstance(value, bool):
        return [f"{key}: expected {attr.type.value}, got bool"]
    if not isinstance(value, expected):
        return [f"{key}: expected {attr.type.value}, got {type(value).__name__}"]

    errors = []
    for validator in attr.validators:
        errors.extend(validator(value, key))
    return errors


def _check_value(attr: Attribute, value: Any, key: str) -> List[str]:
    if attr.type in _PRIMITIVE_TYPES:
        return _check_primitive(attr, value, key)

    if attr.type == AttributeType.MAP:
        if not isinstance(value, dict):
            return [f"{key}: expected map, got {type(value).__name__}"]
        errors = []
        if isinstance(attr.elem, Attribute):
            for k, v in value.items():
                errors.extend(_check_value(attr.elem, v, f"{key}.{k}"))
        return errors

    if not isinstance(value, (list, tuple, set, frozenset)):
        return [f"{key}: expected {attr.type.value}, got {type(value).__name__}"]

    errors = []
    if attr.max_items and len(value) > attr.max_items:
        errors.append(f"{key}: attribute supports {attr.max_items} item maximum, config has {len(value)} declared")

    for index, item in enumerate(value):
        item_key = f"{key}.{index}"
        if attr.is_block():
            if not isinstance(item, dict):
                errors.append(f"{item_key}: expected block, got {type(item).__name__}")
                continue
            errors.extend(validate_config(attr.elem, item, path=f"{item_key}."))
        elif isinstance(attr.elem, Attribute):
            errors.extend(_check_value(attr.elem, item, item_key))

    return errors


def validate_config(schema_map: Dict[str, Attribute], config: Dict[str, Any],
                    path: str = "") -> List[str]:
    """Validate a configuration tree against a shape.

    Args:
        schema_map: Shape to validate against
        config: Configuration tree
        path: Prefix for error keys of nested blocks

    Returns:
        List of validation errors (empty if valid)
    """
    if isinstance(schema_map, Shape):
        schema_map = schema_map.attributes

    errors = []
    prefix = f"{path.rstrip('.')}: " if path else ""

    for key in config:
        if key not in schema_map:
            errors.append(f"{path}{key}: unsupported argument")

    for key, attr in schema_map.items():
        full_key = f"{path}{key}"
        value = config.get(key)
        present = is_set(value)

        if attr.exactly_one_of:
            specified = [k for k in attr.exactly_one_of if is_set(config.get(k))]
            if not specified:
                errors.append(f"{prefix}one of `{','.join(attr.exactly_one_of)}` must be specified")
            elif len(specified) > 1:
                errors.append(
                    f"{prefix}only one of `{','.join(attr.exactly_one_of)}` can be specified, "
                    f"but `{','.join(specified)}` were specified."
                )

        if not present:
            if attr.required:
                errors.append(f"{full_key}: required field is not set")
            continue

        if attr.computed and not attr.optional and not attr.required:
            errors.append(f"{full_key}: computed attribute cannot be set")
            continue

        for other in attr.conflicts_with:
            if is_set(config.get(other)):
                errors.append(f"{full_key}: conflicts with {other}")

        for other in attr.required_with:
            if not is_set(config.get(other)):
                errors.append(f"{full_key}: all of `{key},{other}` must be specified")

        errors.extend(_check_value(attr, value, full_key))

    # exactly_one_of is shared by sibling attributes; report each failure once
    return list(dict.fromkeys(errors))


def apply_defaults(schema_map: Dict[str, Attribute], config: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``config`` with schema defaults filled in.

    Nested blocks are filled recursively. Sets of primitives are returned as
    ``set`` values.
    """
    if isinstance(schema_map, Shape):
        schema_map = schema_map.attributes

    result = dict(config)

    for key, attr in schema_map.items():
        value = result.get(key)

        if value is None:
            if attr.default is not None:
                result[key] = attr.default
            continue

        if attr.is_block() and isinstance(value, (list, tuple, set, frozenset)):
            result[key] = [
                apply_defaults(attr.elem, item) if isinstance(item, dict) else item
                for item in value
            ]
        elif attr.type == AttributeType.SET and isinstance(value, (list, tuple, frozenset)):
            result[key] = set(value)

    return result
