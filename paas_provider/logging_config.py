"""Logging configuration and setup."""

import logging
import logging.handlers
import json
from typing import Dict, Any, Optional
from datetime import datetime, timezone

from paas_provider.config import Config, config as default_config


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    EXTRA_FIELDS = ('service_id', 'service_type', 'operation', 'status')

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class OperationLogger:
    """Logger for service lifecycle operations."""

    def __init__(self):
        self.logger = logging.getLogger('paas_provider.operations')

    def log_operation(self, service_id: str, operation: str,
                      status: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Log a create/update/delete step for a service."""
        extra = {
            'service_id': service_id,
            'operation': operation,
            'status': status or ''
        }

        message = f"Service operation: {operation} for service {service_id}"
        if status:
            message += f" (status {status})"
        if details:
            message += f" - Details: {json.dumps(details, default=str)}"

        self.logger.info(message, extra=extra)

    def log_wait(self, service_id: str, operation: str, status: str, probes: int):
        """Log the outcome of a wait."""
        self.logger.info(
            f"Wait for {operation} of service {service_id} finished with status {status} "
            f"after {probes} probes",
            extra={'service_id': service_id, 'operation': f"wait_{operation}", 'status': status}
        )


def setup_logging(cfg: Optional[Config] = None):
    """Set up logging configuration."""
    cfg = cfg or default_config

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, cfg.logging.level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if cfg.logging.json_output:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(cfg.logging.format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if cfg.logging.file_path:
        file_handler = logging.handlers.RotatingFileHandler(
            cfg.logging.file_path,
            maxBytes=cfg.logging.max_file_size,
            backupCount=cfg.logging.backup_count
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger('paas_provider').setLevel(logging.DEBUG)


operation_logger = OperationLogger()
