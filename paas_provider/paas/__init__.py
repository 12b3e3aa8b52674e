"""PaaS service lifecycle: lookups, waits and CRUD reconciliation."""

from .consts import ServiceStatus
from .find import find_service_by_id
from .service import (
    ServiceReconciler,
    expand_backup_settings,
    flatten_backup_settings,
    flatten_instances,
    resource_service_schema,
)
from .state import ProbeResult, StateChangeConf, WaitPhase, WaitState, step
from .status import status_service
from .wait import wait_service_created, wait_service_deleted, wait_service_updated

__all__ = [
    'ServiceStatus',
    'find_service_by_id',
    'status_service',
    'ProbeResult',
    'StateChangeConf',
    'WaitPhase',
    'WaitState',
    'step',
    'wait_service_created',
    'wait_service_updated',
    'wait_service_deleted',
    'ServiceReconciler',
    'expand_backup_settings',
    'flatten_backup_settings',
    'flatten_instances',
    'resource_service_schema',
]
