"""Pytest configuration and fixtures."""

import pytest
import tempfile
import os
from unittest.mock import Mock

from paas_provider.clients.base import PaaSClient
from paas_provider.config import Config, WaitConfig
from paas_provider.models.service import Service


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is called."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def temp_config_path():
    """Create a temporary YAML config file path."""
    with tempfile.NamedTemporaryFile(suffix='.yaml', delete=False) as f:
        path = f.name

    yield path

    # Cleanup
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def test_config():
    """Create test configuration."""
    config = Config()
    config.logging.level = "DEBUG"
    config.logging.json_output = False
    return config


@pytest.fixture
def wait_config():
    """Wait configuration with short timeouts."""
    return WaitConfig(
        create_timeout=60,
        update_timeout=60,
        delete_timeout=60,
        base_delay=1.0,
        max_delay=10.0,
        not_found_checks=3,
    )


@pytest.fixture
def fake_clock():
    """Fake clock; pass ``clock=fake_clock, sleep=fake_clock.sleep`` to waits."""
    return FakeClock()


@pytest.fixture
def mock_client():
    """Mock PaaS client for testing."""
    return Mock(spec=PaaSClient)


@pytest.fixture
def make_service():
    """Factory for services in a given status."""
    def _make_service(status: str = "READY", service_id: str = "svc-1", **kwargs) -> Service:
        return Service(id=service_id, status=status, **kwargs)

    return _make_service


@pytest.fixture
def to_response_parameters():
    """Rename request keys to the response keys the API echoes them back as."""
    shared = {
        'log_to': 'logTo',
        'logging_tags': 'loggingTags',
        'monitor_by': 'monitorBy',
        'monitoring_labels': 'monitoringLabels',
    }

    def _to_response_parameters(fields, parameters):
        if parameters is None:
            return None

        renames = dict(shared)
        for parameter_field in fields:
            renames[parameter_field.request_name] = parameter_field.response_name

        return {renames.get(key, key): value for key, value in parameters.items()}

    return _to_response_parameters
