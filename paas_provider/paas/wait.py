"""Waits for PaaS service create, update and delete operations."""

import logging
import threading
from typing import Any, Iterable, Optional

from paas_provider.clients.base import PaaSClient
from paas_provider.config import WaitConfig, config
from paas_provider.exceptions import (
    RemoteOperationError,
    ServiceRolledBackError,
    WaitError,
    is_not_found,
)
from paas_provider.logging_config import operation_logger
from paas_provider.models.service import Service
from paas_provider.paas.consts import (
    CREATE_PENDING_STATUSES,
    CREATE_TARGET_STATUSES,
    DELETE_NOT_FOUND_CHECKS,
    DELETE_PENDING_STATUSES,
    DELETE_TARGET_STATUSES,
    UPDATE_PENDING_STATUSES,
    UPDATE_TARGET_STATUSES,
    ServiceStatus,
)
from paas_provider.paas.state import StateChangeConf
from paas_provider.paas.status import status_service

logger = logging.getLogger(__name__)


def _state_change_conf(
    client: PaaSClient,
    service_id: str,
    pending: Iterable[ServiceStatus],
    target: Iterable[ServiceStatus],
    timeout: float,
    wait_config: Optional[WaitConfig],
    **options: Any
) -> StateChangeConf:
    wait_config = wait_config or config.wait

    settings = {
        'delay': wait_config.delay,
        'poll_interval': wait_config.poll_interval,
        'min_timeout': wait_config.min_timeout,
        'base_delay': wait_config.base_delay,
        'max_delay': wait_config.max_delay,
        'not_found_checks': wait_config.not_found_checks,
        'continuous_target_occurence': wait_config.continuous_target_occurence,
    }
    settings.update(options)

    return StateChangeConf(
        refresh=status_service(client, service_id),
        pending=pending,
        target=target,
        timeout=timeout,
        **settings
    )


def set_service_error_to_last_error(error: WaitError, service: Optional[Service]):
    """Attach the error reported by a service in ERROR status."""
    if service is None or service.status != ServiceStatus.ERROR.value:
        return

    error.set_last_error(RemoteOperationError(service.errorCode, service.errorDescription))


def _run(conf: StateChangeConf, service_id: str, operation: str,
         cancel_event: Optional[threading.Event]) -> Optional[Service]:
    try:
        service = conf.wait(cancel_event)
    except WaitError as e:
        set_service_error_to_last_error(e, e.service)
        operation_logger.log_wait(service_id, operation, conf.last_state.last_status or 'FAILED',
                                  conf.last_state.probes)
        raise

    operation_logger.log_wait(service_id, operation, conf.last_state.last_status, conf.last_state.probes)
    return service


def wait_service_created(
    client: PaaSClient,
    service_id: str,
    timeout: Optional[float] = None,
    wait_config: Optional[WaitConfig] = None,
    cancel_event: Optional[threading.Event] = None,
    **options: Any
) -> Service:
    """Wait for a new service to become READY.

    Extra keyword arguments are passed to ``StateChangeConf``.
    """
    wait_config = wait_config or config.wait
    conf = _state_change_conf(
        client, service_id,
        pending=CREATE_PENDING_STATUSES,
        target=CREATE_TARGET_STATUSES,
        timeout=wait_config.create_timeout if timeout is None else timeout,
        wait_config=wait_config,
        **options
    )

    return _run(conf, service_id, 'create', cancel_event)


def wait_service_updated(
    client: PaaSClient,
    service_id: str,
    timeout: Optional[float] = None,
    wait_config: Optional[WaitConfig] = None,
    cancel_event: Optional[threading.Event] = None,
    **options: Any
) -> Service:
    """Wait for a modified service to become READY again.

    Raises:
        ServiceRolledBackError: if the service is READY but the API rolled the
            change back
    """
    wait_config = wait_config or config.wait
    conf = _state_change_conf(
        client, service_id,
        pending=UPDATE_PENDING_STATUSES,
        target=UPDATE_TARGET_STATUSES,
        timeout=wait_config.update_timeout if timeout is None else timeout,
        wait_config=wait_config,
        **options
    )

    service = _run(conf, service_id, 'update', cancel_event)

    if service is not None and service.status == ServiceStatus.READY.value and service.isRolledBack:
        logger.warning(f"Update of service {service_id} was rolled back")
        raise ServiceRolledBackError(service=service)

    return service


def wait_service_deleted(
    client: PaaSClient,
    service_id: str,
    timeout: Optional[float] = None,
    wait_config: Optional[WaitConfig] = None,
    cancel_event: Optional[threading.Event] = None,
    **options: Any
) -> Optional[Service]:
    """Wait for a service to be deleted.

    Returns:
        None once the service is gone, or the service in DELETED status
    """
    wait_config = wait_config or config.wait
    options.setdefault('not_found_checks', DELETE_NOT_FOUND_CHECKS)
    conf = _state_change_conf(
        client, service_id,
        pending=DELETE_PENDING_STATUSES,
        target=DELETE_TARGET_STATUSES,
        timeout=wait_config.delete_timeout if timeout is None else timeout,
        wait_config=wait_config,
        **options
    )

    try:
        return _run(conf, service_id, 'delete', cancel_event)
    except Exception as e:
        if is_not_found(e):
            operation_logger.log_wait(service_id, 'delete', ServiceStatus.DELETED.value,
                                      conf.last_state.probes)
            return None
        raise
