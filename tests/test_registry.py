"""Tests for the service manager registry."""

import logging

import pytest

from paas_provider.exceptions import ErrorCode, UnknownServiceTypeError
from paas_provider.services import (
    build_registry,
    default_registry,
    managed_service_types,
    manager,
)
from paas_provider.services.memcached import memcached
from paas_provider.services.redis import redis


class TestRegistry:
    """Test registry lookups."""

    def test_managed_service_types_sorted(self):
        """Test every built-in service is registered, sorted by type."""
        assert managed_service_types() == (
            "elasticsearch", "memcached", "mongodb", "mysql", "pgsql", "rabbitmq", "redis",
        )

    @pytest.mark.parametrize("service_type", [
        "elasticsearch", "memcached", "mongodb", "mysql", "pgsql", "rabbitmq", "redis",
    ])
    def test_manager_lookup(self, service_type):
        """Test each registered type resolves to its manager."""
        service_manager = manager(service_type)

        assert service_manager is not None
        assert service_manager.service_type == service_type

    def test_unknown_service_type_logged(self, caplog):
        """Test unknown types return None and log at ERROR."""
        with caplog.at_level(logging.ERROR):
            assert manager("cassandra") is None

        assert "Unknown service type: cassandra" in caplog.text

    def test_require_unknown_service_type(self):
        """Test require raises for unknown types."""
        with pytest.raises(UnknownServiceTypeError) as exc_info:
            default_registry().require("cassandra")

        assert exc_info.value.error_code == ErrorCode.UNKNOWN_SERVICE_TYPE
        assert exc_info.value.details['service_type'] == "cassandra"

    def test_default_registry_is_cached(self):
        """Test the default registry is built once."""
        assert default_registry() is default_registry()

    def test_custom_registry(self):
        """Test a registry with a subset of managers."""
        registry = build_registry([redis, memcached])

        assert len(registry) == 2
        assert "redis" in registry
        assert "mysql" not in registry
        assert registry.managed_service_types() == ("memcached", "redis")
        assert registry.managers() == (memcached, redis)

    def test_duplicate_service_type(self):
        """Test duplicate types are rejected."""
        with pytest.raises(ValueError, match="Duplicate service type: redis"):
            build_registry([redis, redis])

    def test_registry_is_read_only(self):
        """Test the underlying table can't be modified."""
        registry = build_registry([redis])

        with pytest.raises(TypeError):
            registry._managers["mysql"] = redis
