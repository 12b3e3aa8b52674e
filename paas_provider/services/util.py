"""Service type constants and unit conversion helpers."""

import logging
from typing import List, Union

from paas_provider.exceptions import UnsupportedDimensionError

logger = logging.getLogger(__name__)

SERVICE_TYPE_ELASTICSEARCH = "elasticsearch"
SERVICE_TYPE_MEMCACHED = "memcached"
SERVICE_TYPE_MONGODB = "mongodb"
SERVICE_TYPE_MYSQL = "mysql"
SERVICE_TYPE_POSTGRESQL = "pgsql"
SERVICE_TYPE_RABBITMQ = "rabbitmq"
SERVICE_TYPE_REDIS = "redis"

SERVICE_CLASS_CACHER = "cacher"
SERVICE_CLASS_DATABASE = "database"
SERVICE_CLASS_MESSAGE_BROKER = "message_broker"
SERVICE_CLASS_SEARCH = "search"

BYTE = 1
KILOBYTE = 1 << 10
MEGABYTE = 1 << 20
GIGABYTE = 1 << 30
TERABYTE = 1 << 40

B = "B"
KIB = "KiB"
MIB = "MiB"
GIB = "GiB"
TIB = "TiB"

_DIMENSIONS = {
    B: BYTE,
    KIB: KILOBYTE,
    MIB: MEGABYTE,
    GIB: GIGABYTE,
    TIB: TERABYTE,
}

Number = Union[int, float]


def service_type_values() -> List[str]:
    return [
        SERVICE_TYPE_ELASTICSEARCH,
        SERVICE_TYPE_MEMCACHED,
        SERVICE_TYPE_MONGODB,
        SERVICE_TYPE_MYSQL,
        SERVICE_TYPE_POSTGRESQL,
        SERVICE_TYPE_RABBITMQ,
        SERVICE_TYPE_REDIS,
    ]


def service_class_values() -> List[str]:
    return [
        SERVICE_CLASS_CACHER,
        SERVICE_CLASS_DATABASE,
        SERVICE_CLASS_MESSAGE_BROKER,
        SERVICE_CLASS_SEARCH,
    ]


def camelize(name: str) -> str:
    """Convert a snake_case parameter name to the camelCase used in API responses."""
    first, *rest = name.split("_")
    return first + "".join(part[:1].upper() + part[1:] for part in rest)


def dimension_to_bytes(dimension: str) -> int:
    """Convert a dimension tag to its value in bytes.

    Raises:
        UnsupportedDimensionError: if the tag is not one of B, KiB, MiB, GiB, TiB.
    """
    try:
        return _DIMENSIONS[dimension]
    except (KeyError, TypeError):
        raise UnsupportedDimensionError(dimension)


def parse_bytes(value: Number, dimension: str) -> Number:
    """Return ``value`` expressed in ``dimension`` as a number of bytes."""
    try:
        multiplier = dimension_to_bytes(dimension)
    except UnsupportedDimensionError as e:
        logger.error(f"Error parsing value `{value} {dimension}` to bytes: {e.message}")
        raise

    return value * multiplier
