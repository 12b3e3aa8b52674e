"""PaaS service API data models.

Field names follow the remote API, which uses camelCase.
"""

from pydantic import BaseModel, Field
from typing import Dict, Any, Optional, List


class UserCreateRequest(BaseModel):
    """Service or database user in a create/modify request."""
    name: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class DatabaseCreateRequest(BaseModel):
    """Database in a create/modify request."""
    backupEnabled: Optional[bool] = None
    name: Optional[str] = None
    users: Optional[List[UserCreateRequest]] = None
    parameters: Optional[Dict[str, Any]] = None


class UserResponse(BaseModel):
    """Service or database user as returned by the API."""
    id: Optional[str] = None
    name: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class DatabaseResponse(BaseModel):
    """Database as returned by the API."""
    backupEnabled: Optional[bool] = None
    id: Optional[str] = None
    name: Optional[str] = None
    users: Optional[List[UserResponse]] = None
    parameters: Optional[Dict[str, Any]] = None


class BackupSettingsRequest(BaseModel):
    """Backup settings in a create/modify request."""
    bucketName: Optional[str] = None
    enabled: Optional[bool] = None
    backupExpirationDays: Optional[int] = None
    notificationEmail: Optional[str] = None
    startTime: Optional[str] = None
    userLogin: Optional[str] = None


class BackupSettingsResponse(BaseModel):
    """Backup settings as returned by the API."""
    bucketName: Optional[str] = None
    enabled: Optional[bool] = None
    backupExpirationDays: Optional[int] = None
    notificationEmail: Optional[str] = None
    startTime: Optional[str] = None
    userId: Optional[str] = None
    userLogin: Optional[str] = None


class Instance(BaseModel):
    """Virtual machine backing a service."""
    endpoint: Optional[str] = None
    index: Optional[int] = None
    instanceId: Optional[str] = None
    interfaceId: Optional[str] = None
    name: Optional[str] = None
    privateIp: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None


class SecurityGroup(BaseModel):
    """Security group attached to a service."""
    id: Optional[str] = None
    createdAutomatically: Optional[bool] = None


class Service(BaseModel):
    """PaaS service instance."""
    id: str = Field(..., description="Service identifier")
    name: Optional[str] = None
    status: Optional[str] = Field(None, description="Current service status")
    serviceType: Optional[str] = None
    serviceClass: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    users: Optional[List[UserResponse]] = None
    databases: Optional[List[DatabaseResponse]] = None
    errorCode: Optional[str] = Field(None, description="Error code if status is ERROR")
    errorDescription: Optional[str] = Field(None, description="Error description if status is ERROR")
    isRolledBack: Optional[bool] = Field(None, description="Whether the last update was rolled back")
    backupSettings: Optional[BackupSettingsResponse] = None
    instances: Optional[List[Instance]] = None
    instanceType: Optional[str] = None
    highAvailability: Optional[bool] = None
    arbitratorRequired: Optional[bool] = None
    dataVolumeType: Optional[str] = None
    dataVolumeSize: Optional[int] = None
    dataVolumeIops: Optional[int] = None
    rootVolumeType: Optional[str] = None
    rootVolumeSize: Optional[int] = None
    rootVolumeIops: Optional[int] = None
    endpoints: Optional[List[str]] = None
    networkInterfaceIds: Optional[List[str]] = None
    subnetIds: Optional[List[str]] = None
    securityGroups: Optional[List[SecurityGroup]] = None
    sshKeyName: Optional[str] = None
    supportedFeatures: Optional[List[str]] = None
    totalCpuCount: Optional[int] = None
    totalMemory: Optional[int] = None
    vpcId: Optional[str] = None


class CreateServiceInput(BaseModel):
    """Request for creating a service."""
    name: str = Field(..., description="Service name")
    serviceType: str = Field(..., description="Service type")
    serviceClass: Optional[str] = None
    instanceType: str = Field(..., description="Instance type")
    highAvailability: Optional[bool] = None
    arbitratorRequired: Optional[bool] = None
    parameters: Optional[Dict[str, Any]] = None
    users: Optional[List[UserCreateRequest]] = None
    databases: Optional[List[DatabaseCreateRequest]] = None
    backupSettings: Optional[BackupSettingsRequest] = None
    rootVolumeType: Optional[str] = None
    rootVolumeSize: Optional[int] = None
    rootVolumeIops: Optional[int] = None
    dataVolumeType: Optional[str] = None
    dataVolumeSize: Optional[int] = None
    dataVolumeIops: Optional[int] = None
    securityGroupIds: Optional[List[str]] = None
    subnetIds: Optional[List[str]] = None
    networkInterfaceIds: Optional[List[str]] = None
    sshKeyName: Optional[str] = None
    userData: Optional[str] = None
    userDataContentType: Optional[str] = None


class ModifyServiceInput(BaseModel):
    """Request for modifying a service."""
    serviceId: str = Field(..., description="Service identifier")
    backupSettings: Optional[BackupSettingsRequest] = None
    users: Optional[List[UserCreateRequest]] = None
    databases: Optional[List[DatabaseCreateRequest]] = None


class DeleteServiceInput(BaseModel):
    """Request for deleting a service."""
    serviceId: str = Field(..., description="Service identifier")
    deleteInterfaces: Optional[bool] = None
