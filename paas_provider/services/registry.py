"""Registry of service managers keyed by service type."""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from paas_provider.exceptions import UnknownServiceTypeError
from paas_provider.services.base import ServiceManager
from paas_provider.services.elasticsearch import elasticsearch
from paas_provider.services.memcached import memcached
from paas_provider.services.mongodb import mongodb
from paas_provider.services.mysql import mysql
from paas_provider.services.pgsql import pgsql
from paas_provider.services.rabbitmq import rabbitmq
from paas_provider.services.redis import redis

logger = logging.getLogger(__name__)

DEFAULT_MANAGERS = (
    elasticsearch,
    memcached,
    mongodb,
    mysql,
    pgsql,
    rabbitmq,
    redis,
)


class Registry:
    """Read-only table of service managers.

    The table is fixed at construction, so a registry can be shared between
    threads without locking.
    """

    def __init__(self, managers: Iterable[ServiceManager]):
        table = {}
        for service_manager in managers:
            if service_manager.service_type in table:
                raise ValueError(f"Duplicate service type: {service_manager.service_type}")
            table[service_manager.service_type] = service_manager

        self._managers: Mapping[str, ServiceManager] = MappingProxyType(table)

    def manager(self, service_type: str) -> Optional[ServiceManager]:
        """Return the manager for a service type, or None if it isn't registered."""
        service_manager = self._managers.get(service_type)
        if service_manager is None:
            logger.error(f"Unknown service type: {service_type}")
        return service_manager

    def require(self, service_type: str) -> ServiceManager:
        """Return the manager for a service type.

        Raises:
            UnknownServiceTypeError: if the service type isn't registered.
        """
        service_manager = self._managers.get(service_type)
        if service_manager is None:
            raise UnknownServiceTypeError(service_type)
        return service_manager

    def managed_service_types(self) -> Tuple[str, ...]:
        return tuple(sorted(self._managers))

    def managers(self) -> Tuple[ServiceManager, ...]:
        return tuple(self._managers[k] for k in self.managed_service_types())

    def __contains__(self, service_type: str) -> bool:
        return service_type in self._managers

    def __len__(self) -> int:
        return len(self._managers)


def build_registry(managers: Iterable[ServiceManager] = DEFAULT_MANAGERS) -> Registry:
    return Registry(managers)


@lru_cache(maxsize=None)
def default_registry() -> Registry:
    """Registry of every supported service, built on first use."""
    return build_registry()


def manager(service_type: str) -> Optional[ServiceManager]:
    return default_registry().manager(service_type)


def managed_service_types() -> Tuple[str, ...]:
    return default_registry().managed_service_types()
