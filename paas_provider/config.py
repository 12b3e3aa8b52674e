"""Configuration management for the PaaS provider core."""

import os
import json
import yaml
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, fields
from pathlib import Path

from paas_provider.exceptions import ConfigurationError


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json_output: bool = True
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class WaitConfig:
    """Wait/poll configuration for long-running service operations.

    All durations are in seconds.
    """
    create_timeout: float = 30 * 60
    update_timeout: float = 60 * 60
    delete_timeout: float = 15 * 60
    delay: float = 0.0  # Wait before the first probe
    poll_interval: float = 0.0  # Fixed interval between probes, 0 for backoff
    min_timeout: float = 0.0  # Lower bound for the backoff interval
    base_delay: float = 0.1
    max_delay: float = 10.0
    not_found_checks: int = 20
    continuous_target_occurence: int = 1


@dataclass
class Config:
    """Main configuration class."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    wait: WaitConfig = field(default_factory=WaitConfig)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        config = cls()

        # Logging config
        config.logging.level = os.getenv('PAAS_LOG_LEVEL', config.logging.level)
        config.logging.file_path = os.getenv('PAAS_LOG_FILE_PATH')
        config.logging.json_output = os.getenv('PAAS_LOG_JSON', 'true').lower() == 'true'

        # Wait config
        config.wait.create_timeout = _float_env('PAAS_CREATE_TIMEOUT', config.wait.create_timeout)
        config.wait.update_timeout = _float_env('PAAS_UPDATE_TIMEOUT', config.wait.update_timeout)
        config.wait.delete_timeout = _float_env('PAAS_DELETE_TIMEOUT', config.wait.delete_timeout)
        config.wait.poll_interval = _float_env('PAAS_POLL_INTERVAL', config.wait.poll_interval)

        return config

    @classmethod
    def from_file(cls, path: str) -> 'Config':
        """Load configuration from a YAML or JSON file.

        Unknown sections and keys are rejected.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        with open(file_path, 'r') as f:
            if file_path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Build configuration from a nested dictionary."""
        config = cls()

        sections = {'logging': config.logging, 'wait': config.wait}
        for section_name, values in data.items():
            if section_name not in sections:
                raise ConfigurationError(
                    f"Unknown configuration section: {section_name}", config_key=section_name
                )

            section = sections[section_name]
            known = {f.name: f for f in fields(section)}
            for key, value in (values or {}).items():
                if key not in known:
                    raise ConfigurationError(
                        f"Unknown configuration key: {section_name}.{key}",
                        config_key=f"{section_name}.{key}"
                    )
                setattr(section, key, value)

        return config


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default

    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {name}: {value}", config_key=name)


# Global configuration instance
config = Config.from_env()
