"""Data models for the PaaS API."""

from .service import (
    BackupSettingsRequest,
    BackupSettingsResponse,
    CreateServiceInput,
    DatabaseCreateRequest,
    DatabaseResponse,
    DeleteServiceInput,
    Instance,
    ModifyServiceInput,
    SecurityGroup,
    Service,
    UserCreateRequest,
    UserResponse,
)

__all__ = [
    'BackupSettingsRequest',
    'BackupSettingsResponse',
    'CreateServiceInput',
    'DatabaseCreateRequest',
    'DatabaseResponse',
    'DeleteServiceInput',
    'Instance',
    'ModifyServiceInput',
    'SecurityGroup',
    'Service',
    'UserCreateRequest',
    'UserResponse',
]
