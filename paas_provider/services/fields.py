"""Parameter field descriptors.

Each service declares its parameters as a table of ``ParameterField`` values.
A field knows how to move itself between the declarative tree (snake_case
keys) and the API parameter bags: requests use ``request_key`` and responses
use ``response_key``, which defaults to the camelCase form of the name.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from paas_provider.exceptions import UnsupportedDimensionError
from paas_provider.services.nullable import NullableBool, validate_nullable_bool
from paas_provider.services.schema import Attribute, AttributeType
from paas_provider.services.util import B, camelize, dimension_to_bytes, parse_bytes
from paas_provider.services.validation import Validator

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """How a field is transcoded."""
    SCALAR = "scalar"
    SENTINEL = "sentinel"
    NULLABLE_BOOL = "nullable_bool"
    DIMENSIONED = "dimensioned"
    SET = "set"
    MAP = "map"


def _matches_type(value: Any, attr_type: AttributeType) -> bool:
    if attr_type == AttributeType.BOOL:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if attr_type == AttributeType.INT:
        return isinstance(value, int)
    if attr_type == AttributeType.FLOAT:
        return isinstance(value, (int, float))
    if attr_type == AttributeType.STRING:
        return isinstance(value, str)
    if attr_type == AttributeType.SET:
        return isinstance(value, (list, tuple, set, frozenset))
    if attr_type == AttributeType.MAP:
        return isinstance(value, dict)
    return False


def _is_zero(value: Any) -> bool:
    if isinstance(value, (list, tuple, set, frozenset, dict, str)):
        return len(value) == 0
    return value == 0


def _coerce(value: Any, attr_type: AttributeType) -> Any:
    if attr_type == AttributeType.FLOAT:
        return float(value)
    if attr_type == AttributeType.SET:
        return sorted(value, key=str)
    if attr_type == AttributeType.MAP:
        return dict(value)
    return value


@dataclass(frozen=True)
class ParameterField:
    """Declarative parameter and its wire mapping."""
    name: str
    type: AttributeType
    kind: FieldKind = FieldKind.SCALAR
    request_key: Optional[str] = None
    response_key: Optional[str] = None
    omit_zero: bool = True
    sentinel: Any = None
    unit: str = B
    required: bool = False
    default: Any = None
    sensitive: bool = False
    validators: Tuple[Validator, ...] = ()
    elem_validators: Tuple[Validator, ...] = ()

    @property
    def request_name(self) -> str:
        return self.request_key or self.name

    @property
    def response_name(self) -> str:
        return self.response_key or camelize(self.name)

    def expand(self, tree: Dict[str, Any], parameters: Dict[str, Any]) -> None:
        """Copy this field from a declarative tree into a request bag."""
        value = tree.get(self.name)

        if self.kind == FieldKind.NULLABLE_BOOL:
            if not isinstance(value, str):
                return
            try:
                parsed, null = NullableBool(value).value()
            except ValueError:
                return
            if not null:
                parameters[self.request_name] = parsed
            return

        if not _matches_type(value, self.type):
            return

        if self.kind == FieldKind.SENTINEL:
            if value != self.sentinel:
                parameters[self.request_name] = _coerce(value, self.type)
            return

        if self.omit_zero and _is_zero(value):
            return

        if self.kind == FieldKind.DIMENSIONED:
            parameters[self.request_name] = {
                "dimension": self.unit,
                "value": _coerce(value, self.type),
            }
            return

        parameters[self.request_name] = _coerce(value, self.type)

    def flatten(self, parameters: Dict[str, Any], tree: Dict[str, Any]) -> None:
        """Copy this field from a response bag into a declarative tree."""
        value = parameters.get(self.response_name)

        if self.kind == FieldKind.SENTINEL:
            if _matches_type(value, self.type):
                tree[self.name] = _coerce(value, self.type)
            else:
                tree[self.name] = self.sentinel
            return

        if self.kind == FieldKind.NULLABLE_BOOL:
            if isinstance(value, bool):
                tree[self.name] = str(NullableBool.from_bool(value))
            return

        if self.kind == FieldKind.DIMENSIONED:
            flattened = self._flatten_dimensioned(value)
            if flattened is not None:
                tree[self.name] = flattened
            return

        if self.kind == FieldKind.SET:
            if isinstance(value, (list, tuple, set, frozenset)):
                tree[self.name] = set(value)
            return

        if _matches_type(value, self.type):
            tree[self.name] = _coerce(value, self.type)

    def _flatten_dimensioned(self, value: Any) -> Any:
        if not isinstance(value, dict):
            return None

        magnitude = value.get("value")
        if not _matches_type(magnitude, AttributeType.FLOAT):
            return None

        try:
            size = parse_bytes(magnitude, value.get("dimension"))
        except UnsupportedDimensionError:
            # the field is left unset rather than failing the whole read
            logger.debug(f"Omitting parameter {self.name} with unsupported dimension")
            return None

        if self.unit != B:
            size = size / dimension_to_bytes(self.unit)

        if self.type == AttributeType.INT:
            return int(size)
        return float(size)

    def resource_attribute(self, force_new: bool = False) -> Attribute:
        """Schema attribute for the resource view."""
        if self.kind == FieldKind.NULLABLE_BOOL:
            return Attribute(
                type=AttributeType.STRING,
                optional=not self.required,
                required=self.required,
                force_new=force_new,
                validators=(validate_nullable_bool,) + self.validators,
            )

        elem = None
        if self.type in (AttributeType.SET, AttributeType.MAP):
            elem = Attribute(type=AttributeType.STRING, validators=self.elem_validators)

        return Attribute(
            type=self.type,
            optional=not self.required,
            required=self.required,
            sensitive=self.sensitive,
            force_new=force_new,
            default=self.default,
            validators=self.validators,
            elem=elem,
        )

    def data_source_attribute(self) -> Attribute:
        """Schema attribute for the read-only data source view."""
        attr_type = AttributeType.STRING if self.kind == FieldKind.NULLABLE_BOOL else self.type
        elem = None
        if attr_type in (AttributeType.SET, AttributeType.MAP):
            elem = Attribute(type=AttributeType.STRING)

        return Attribute(type=attr_type, computed=True, elem=elem)


def bool_field(name: str, **kwargs) -> ParameterField:
    """Boolean parameter. Always sent, since False is meaningful."""
    kwargs.setdefault("omit_zero", False)
    return ParameterField(name=name, type=AttributeType.BOOL, **kwargs)


def int_field(name: str, **kwargs) -> ParameterField:
    return ParameterField(name=name, type=AttributeType.INT, **kwargs)


def float_field(name: str, **kwargs) -> ParameterField:
    return ParameterField(name=name, type=AttributeType.FLOAT, **kwargs)


def string_field(name: str, **kwargs) -> ParameterField:
    return ParameterField(name=name, type=AttributeType.STRING, **kwargs)


def sentinel_field(name: str, sentinel: Any, attr_type: AttributeType = AttributeType.INT,
                   **kwargs) -> ParameterField:
    """Numeric parameter whose unset value is ``sentinel`` instead of zero."""
    return ParameterField(
        name=name,
        type=attr_type,
        kind=FieldKind.SENTINEL,
        sentinel=sentinel,
        default=sentinel,
        **kwargs
    )


def nullable_bool_field(name: str, **kwargs) -> ParameterField:
    """Tri-state boolean declared as ``""``, ``"true"`` or ``"false"``."""
    return ParameterField(name=name, type=AttributeType.STRING, kind=FieldKind.NULLABLE_BOOL, **kwargs)


def dimensioned_field(name: str, unit: str = B, attr_type: AttributeType = AttributeType.INT,
                      **kwargs) -> ParameterField:
    """Size parameter sent as ``{"dimension": unit, "value": n}``."""
    return ParameterField(name=name, type=attr_type, kind=FieldKind.DIMENSIONED, unit=unit, **kwargs)


def set_field(name: str, **kwargs) -> ParameterField:
    return ParameterField(name=name, type=AttributeType.SET, kind=FieldKind.SET, **kwargs)


def map_field(name: str, **kwargs) -> ParameterField:
    return ParameterField(name=name, type=AttributeType.MAP, kind=FieldKind.MAP, **kwargs)


def expand_fields(fields: Iterable[ParameterField], tree: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Build a request bag from a declarative tree."""
    if tree is None:
        return None

    parameters = {}
    for parameter_field in fields:
        parameter_field.expand(tree, parameters)
    return parameters


def flatten_fields(fields: Iterable[ParameterField], parameters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Build a declarative tree from a response bag."""
    if parameters is None:
        return {}

    tree = {}
    for parameter_field in fields:
        parameter_field.flatten(parameters, tree)
    return tree
