"""Service parameter mapping for PaaS services."""

from .base import ServiceManager
from .registry import (
    Registry,
    build_registry,
    default_registry,
    manager,
    managed_service_types,
)
from .util import (
    dimension_to_bytes,
    parse_bytes,
    service_class_values,
    service_type_values,
)

__all__ = [
    'ServiceManager',
    'Registry',
    'build_registry',
    'default_registry',
    'manager',
    'managed_service_types',
    'dimension_to_bytes',
    'parse_bytes',
    'service_class_values',
    'service_type_values',
]
