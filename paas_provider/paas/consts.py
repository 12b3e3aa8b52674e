"""PaaS service status values and lifecycle defaults."""

from enum import Enum


class ServiceStatus(str, Enum):
    """Service status enumeration reported by the control plane."""
    PENDING = "PENDING"
    CLAIMED = "CLAIMED"
    CREATING = "CREATING"
    PROVISIONING = "PROVISIONING"
    UPDATING = "UPDATING"
    RECOVERING = "RECOVERING"
    DELETING = "DELETING"
    DELETED = "DELETED"
    READY = "READY"
    ERROR = "ERROR"


SERVICE_NOT_FOUND_CODE = "Document.NotFound"

# Resource timeouts, in seconds
SERVICE_CREATE_TIMEOUT = 30 * 60
SERVICE_UPDATE_TIMEOUT = 60 * 60
SERVICE_DELETE_TIMEOUT = 15 * 60

CREATE_PENDING_STATUSES = (
    ServiceStatus.PENDING,
    ServiceStatus.CLAIMED,
    ServiceStatus.CREATING,
    ServiceStatus.PROVISIONING,
)
CREATE_TARGET_STATUSES = (ServiceStatus.READY,)

UPDATE_PENDING_STATUSES = (ServiceStatus.UPDATING, ServiceStatus.RECOVERING)
UPDATE_TARGET_STATUSES = (ServiceStatus.READY,)

DELETE_PENDING_STATUSES = (ServiceStatus.PENDING, ServiceStatus.CLAIMED, ServiceStatus.DELETING)
DELETE_TARGET_STATUSES = (ServiceStatus.DELETED,)
DELETE_NOT_FOUND_CHECKS = 1
