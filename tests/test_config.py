"""Tests for configuration loading."""

import json

import pytest
import yaml

from paas_provider.config import Config, WaitConfig
from paas_provider.exceptions import ConfigurationError, ErrorCode


class TestConfigDefaults:
    """Test default configuration values."""

    def test_wait_defaults(self):
        """Test the default wait timeouts and polling settings."""
        config = Config()

        assert config.wait.create_timeout == 1800
        assert config.wait.update_timeout == 3600
        assert config.wait.delete_timeout == 900
        assert config.wait.base_delay == 0.1
        assert config.wait.max_delay == 10.0
        assert config.wait.not_found_checks == 20
        assert config.wait.continuous_target_occurence == 1

    def test_logging_defaults(self):
        """Test the default logging settings."""
        config = Config()

        assert config.logging.level == "INFO"
        assert config.logging.json_output is True
        assert config.logging.file_path is None

    def test_instances_are_independent(self):
        """Test each config gets its own sections."""
        first, second = Config(), Config()
        first.wait.create_timeout = 5

        assert second.wait.create_timeout == 1800


class TestConfigFromEnv:
    """Test loading configuration from environment variables."""

    def test_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv('PAAS_LOG_LEVEL', 'DEBUG')
        monkeypatch.setenv('PAAS_LOG_JSON', 'false')
        monkeypatch.setenv('PAAS_CREATE_TIMEOUT', '120')
        monkeypatch.setenv('PAAS_POLL_INTERVAL', '2.5')

        config = Config.from_env()

        assert config.logging.level == "DEBUG"
        assert config.logging.json_output is False
        assert config.wait.create_timeout == 120.0
        assert config.wait.poll_interval == 2.5
        assert config.wait.delete_timeout == 900

    def test_invalid_number(self, monkeypatch):
        """Test non-numeric timeouts are rejected."""
        monkeypatch.setenv('PAAS_DELETE_TIMEOUT', 'soon')

        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_env()

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR
        assert exc_info.value.details['config_key'] == 'PAAS_DELETE_TIMEOUT'


class TestConfigFromFile:
    """Test loading configuration from files."""

    def test_yaml_file(self, temp_config_path):
        """Test loading a YAML file."""
        with open(temp_config_path, 'w') as f:
            yaml.dump({'logging': {'level': 'WARNING'}, 'wait': {'update_timeout': 7200}}, f)

        config = Config.from_file(temp_config_path)

        assert config.logging.level == "WARNING"
        assert config.wait.update_timeout == 7200
        assert config.wait.create_timeout == 1800

    def test_json_file(self, tmp_path):
        """Test loading a JSON file."""
        path = tmp_path / "paas.json"
        path.write_text(json.dumps({'wait': {'not_found_checks': 5}}))

        config = Config.from_file(str(path))

        assert config.wait.not_found_checks == 5

    def test_empty_file(self, temp_config_path):
        """Test an empty file yields the defaults."""
        config = Config.from_file(temp_config_path)

        assert config.wait == WaitConfig()

    def test_missing_file(self, tmp_path):
        """Test a missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            Config.from_file(str(tmp_path / "missing.yaml"))

    def test_unknown_section(self):
        """Test unknown sections are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_dict({'database': {}})

        assert exc_info.value.details['config_key'] == 'database'

    def test_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_dict({'wait': {'retries': 3}})

        assert exc_info.value.details['config_key'] == 'wait.retries'
