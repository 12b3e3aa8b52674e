"""Create, read, update and delete of PaaS services.

The resource data is the declarative tree described by
``resource_service_schema()``: top-level settings shared by every service
plus exactly one service block keyed by the service type.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from paas_provider.clients.base import PaaSClient
from paas_provider.config import WaitConfig, config
from paas_provider.exceptions import (
    PaaSProviderError,
    ServiceOperationError,
    is_not_found,
)
from paas_provider.logging_config import operation_logger
from paas_provider.models.service import (
    BackupSettingsRequest,
    BackupSettingsResponse,
    CreateServiceInput,
    DatabaseCreateRequest,
    DeleteServiceInput,
    Instance,
    ModifyServiceInput,
    Service,
    UserCreateRequest,
)
from paas_provider.paas.find import find_service_by_id
from paas_provider.paas.wait import (
    wait_service_created,
    wait_service_deleted,
    wait_service_updated,
)
from paas_provider.services.base import ServiceManager
from paas_provider.services.registry import Registry, default_registry
from paas_provider.services.schema import (
    Attribute,
    AttributeType,
    Shape,
    apply_defaults,
    is_set,
    validate_config,
)
from paas_provider.services.validation import (
    all_of,
    int_between,
    string_in_slice,
    string_len_between,
    string_matches,
)

logger = logging.getLogger(__name__)

VOLUME_TYPE_IO2 = "io2"
VOLUME_TYPES = ("standard", "io1", "io2", "gp2", "gp3", "sc1", "st1", "st2")
USER_DATA_CONTENT_TYPES = ("cloud-config", "x-shellscript")
SERVICE_NAME_PATTERN = r"^[a-z\d][a-z\d\-.]+[a-z\d]$"


def _volume_schema() -> Attribute:
    return Attribute(
        type=AttributeType.LIST,
        max_items=1,
        force_new=True,
        elem={
            "iops": Attribute(type=AttributeType.INT, optional=True, computed=True, force_new=True),
            "size": Attribute(type=AttributeType.INT, optional=True, force_new=True, default=32),
            "type": Attribute(
                type=AttributeType.STRING,
                optional=True,
                force_new=True,
                default="st2",
                validators=(string_in_slice(VOLUME_TYPES),),
            ),
        },
    )


def _computed(attr_type: AttributeType, elem: Any = None) -> Attribute:
    return Attribute(type=attr_type, computed=True, elem=elem)


def resource_service_schema(registry: Optional[Registry] = None) -> Shape:
    """Shape of the service resource, including every registered service block."""
    registry = registry or default_registry()
    string_elem = Attribute(type=AttributeType.STRING)

    root_volume = _volume_schema()
    root_volume.required = True
    data_volume = _volume_schema()
    data_volume.optional = True

    attributes = {
        "arbitrator_required": Attribute(type=AttributeType.BOOL, optional=True, force_new=True, default=False),
        "auto_created_security_group_ids": _computed(AttributeType.SET, string_elem),
        "backup_settings": Attribute(
            type=AttributeType.LIST,
            optional=True,
            max_items=1,
            elem={
                "bucket_name": Attribute(type=AttributeType.STRING, optional=True),
                "enabled": Attribute(type=AttributeType.BOOL, optional=True, default=False),
                "expiration_days": Attribute(
                    type=AttributeType.INT,
                    optional=True,
                    validators=(int_between(1, 3650),),
                ),
                "notification_email": Attribute(type=AttributeType.STRING, optional=True),
                "start_time": Attribute(type=AttributeType.STRING, optional=True),
                "user_id": _computed(AttributeType.STRING),
                "user_login": Attribute(type=AttributeType.STRING, optional=True),
            },
        ),
        "data_volume": data_volume,
        "delete_interfaces_on_destroy": Attribute(type=AttributeType.BOOL, optional=True, default=False),
        "endpoints": _computed(AttributeType.SET, string_elem),
        "error_code": _computed(AttributeType.STRING),
        "error_description": _computed(AttributeType.STRING),
        "high_availability": Attribute(type=AttributeType.BOOL, optional=True, force_new=True, default=False),
        "instances": _computed(AttributeType.SET, {
            "endpoint": _computed(AttributeType.STRING),
            "index": _computed(AttributeType.INT),
            "instance_id": _computed(AttributeType.STRING),
            "interface_id": _computed(AttributeType.STRING),
            "name": _computed(AttributeType.STRING),
            "private_ip": _computed(AttributeType.STRING),
            "role": _computed(AttributeType.STRING),
            "status": _computed(AttributeType.STRING),
        }),
        "instance_type": Attribute(type=AttributeType.STRING, required=True, force_new=True),
        "name": Attribute(
            type=AttributeType.STRING,
            required=True,
            force_new=True,
            validators=(all_of(
                string_len_between(3, 20),
                string_matches(
                    SERVICE_NAME_PATTERN,
                    "name must start and end with Latin letters or number "
                    "and can only contain lowercase Latin letters, numbers, periods (.) and hyphens (-)"
                ),
            ),),
        ),
        "network_interface_ids": Attribute(
            type=AttributeType.SET,
            optional=True,
            computed=True,
            exactly_one_of=("network_interface_ids", "subnet_ids"),
            elem=string_elem,
        ),
        "root_volume": root_volume,
        "security_group_ids": Attribute(
            type=AttributeType.SET, required=True, force_new=True, elem=string_elem
        ),
        "service_class": _computed(AttributeType.STRING),
        "service_type": _computed(AttributeType.STRING),
        "ssh_key_name": Attribute(type=AttributeType.STRING, optional=True, force_new=True),
        "status": _computed(AttributeType.STRING),
        "subnet_ids": Attribute(
            type=AttributeType.SET,
            optional=True,
            computed=True,
            force_new=True,
            exactly_one_of=("network_interface_ids", "subnet_ids"),
            elem=string_elem,
        ),
        "supported_features": _computed(AttributeType.SET, string_elem),
        "total_cpu_count": _computed(AttributeType.INT),
        "total_memory": _computed(AttributeType.INT),
        "user_data": Attribute(
            type=AttributeType.STRING,
            optional=True,
            force_new=True,
            required_with=("user_data_content_type",),
        ),
        "user_data_content_type": Attribute(
            type=AttributeType.STRING,
            optional=True,
            force_new=True,
            required_with=("user_data",),
            validators=(string_in_slice(USER_DATA_CONTENT_TYPES),),
        ),
    }

    service_types = registry.managed_service_types()
    for service_manager in registry.managers():
        attributes[service_manager.service_type] = service_manager.resource_schema(service_types)

    return Shape(attributes=attributes)


def expand_backup_settings(tree: Optional[Dict[str, Any]]) -> Optional[BackupSettingsRequest]:
    if tree is None:
        return None

    backup_settings = BackupSettingsRequest()

    bucket_name = tree.get("bucket_name")
    if isinstance(bucket_name, str) and bucket_name:
        backup_settings.bucketName = bucket_name

    enabled = tree.get("enabled")
    if isinstance(enabled, bool):
        backup_settings.enabled = enabled

    expiration_days = tree.get("expiration_days")
    if isinstance(expiration_days, int) and not isinstance(expiration_days, bool) and expiration_days != 0:
        backup_settings.backupExpirationDays = expiration_days

    notification_email = tree.get("notification_email")
    if isinstance(notification_email, str) and notification_email:
        backup_settings.notificationEmail = notification_email

    start_time = tree.get("start_time")
    if isinstance(start_time, str) and start_time:
        backup_settings.startTime = start_time

    user_login = tree.get("user_login")
    if isinstance(user_login, str) and user_login:
        backup_settings.userLogin = user_login

    return backup_settings


def flatten_backup_settings(backup_settings: Optional[BackupSettingsResponse]) -> List[Dict[str, Any]]:
    """Convert backup settings to a singleton block.

    An empty response block means backups were never configured and yields
    an empty list.
    """
    if backup_settings is None:
        return []

    tree = {}
    mapping = (
        ("bucket_name", backup_settings.bucketName),
        ("enabled", backup_settings.enabled),
        ("expiration_days", backup_settings.backupExpirationDays),
        ("notification_email", backup_settings.notificationEmail),
        ("start_time", backup_settings.startTime),
        ("user_id", backup_settings.userId),
        ("user_login", backup_settings.userLogin),
    )
    for key, value in mapping:
        if value is not None:
            tree[key] = value

    if not tree:
        return []

    return [tree]


def flatten_instances(instances: Optional[Iterable[Optional[Instance]]]) -> List[Dict[str, Any]]:
    if not instances:
        return []

    result = []
    for instance in instances:
        if instance is None:
            continue

        tree = {}
        mapping = (
            ("endpoint", instance.endpoint),
            ("index", instance.index),
            ("instance_id", instance.instanceId),
            ("interface_id", instance.interfaceId),
            ("name", instance.name),
            ("private_ip", instance.privateIp),
            ("role", instance.role),
            ("status", instance.status),
        )
        for key, value in mapping:
            if value is not None:
                tree[key] = value

        result.append(tree)

    return result


def _flatten_volume(volume_type: Optional[str], size: Optional[int], iops: Optional[int]) -> List[Dict[str, Any]]:
    return [{
        "type": volume_type or "",
        "size": size or 0,
        "iops": iops or 0,
    }]


def _first_block(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], dict):
        return value[0]
    return None


class ServiceReconciler:
    """Drives a declared service to its remote counterpart.

    Args:
        client: PaaS control-plane client
        registry: Service managers; defaults to every built-in service
        wait_config: Timeouts and polling settings; defaults to the global config
        wait_options: Extra keyword arguments for the waits, e.g. ``clock`` and ``sleep``
    """

    def __init__(self, client: PaaSClient, registry: Optional[Registry] = None,
                 wait_config: Optional[WaitConfig] = None, **wait_options: Any):
        self.client = client
        self.registry = registry or default_registry()
        self.wait_config = wait_config or config.wait
        self.wait_options = wait_options
        self._schema: Optional[Shape] = None

    @property
    def schema(self) -> Shape:
        if self._schema is None:
            self._schema = resource_service_schema(self.registry)
        return self._schema

    def validate(self, data: Dict[str, Any]) -> List[str]:
        """Validate declared resource data."""
        return validate_config(self.schema, data)

    def manager_for(self, data: Dict[str, Any]) -> Optional[ServiceManager]:
        """Return the manager whose service block is set in ``data``."""
        for service_type in self.registry.managed_service_types():
            if is_set(data.get(service_type)):
                return self.registry.manager(service_type)

        logger.warning("There is no service specified in configuration.")
        return None

    def create(self, data: Dict[str, Any],
               cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Create a service, wait for it to become READY and apply users and databases.

        Returns:
            The resource data read back after creation
        """
        name = data.get("name")

        errors = self.validate(data)
        if errors:
            raise ServiceOperationError(
                f"invalid configuration for PaaS Service {name}: {'; '.join(errors)}",
                operation='create'
            )

        tree = apply_defaults(self.schema, data)
        manager = self.manager_for(tree)
        if manager is None:
            raise ServiceOperationError(
                f"no service block specified for PaaS Service {name}", operation='create'
            )

        request = self._create_request(tree, manager)

        logger.debug(f"Creating PaaS Service: {request.model_dump(exclude_none=True)}")
        try:
            output = self.client.create_service(request)
        except PaaSProviderError as e:
            raise ServiceOperationError(
                f"error creating PaaS Service with name {name}: {e}", operation='create', cause=e
            )

        service_id = output.id
        operation_logger.log_operation(service_id, 'create', output.status,
                                       {'service_type': output.serviceType or manager.service_type})

        try:
            wait_service_created(self.client, service_id, wait_config=self.wait_config,
                                 cancel_event=cancel_event, **self.wait_options)
        except PaaSProviderError as e:
            raise ServiceOperationError(
                f"error waiting for PaaS Service ({service_id}) to create: {e}",
                service_id=service_id, operation='create', cause=e
            )

        # Update to apply changes for service users and databases
        return self.update(service_id, tree, previous=None, cancel_event=cancel_event)

    def _create_request(self, tree: Dict[str, Any], manager: ServiceManager) -> CreateServiceInput:
        block = _first_block(tree.get(manager.service_type)) or {}
        root_volume = _first_block(tree.get("root_volume")) or {}

        request = CreateServiceInput(
            name=tree["name"],
            serviceType=manager.service_type,
            serviceClass=block.get("class"),
            instanceType=tree["instance_type"],
            highAvailability=bool(tree.get("high_availability")),
            rootVolumeType=root_volume.get("type"),
            rootVolumeSize=root_volume.get("size"),
            securityGroupIds=sorted(tree.get("security_group_ids") or []),
            parameters=manager.expand_service_parameters(block),
        )

        if request.rootVolumeType == VOLUME_TYPE_IO2:
            request.rootVolumeIops = root_volume.get("iops")

        if tree.get("arbitrator_required"):
            request.arbitratorRequired = True

        backup_settings = _first_block(tree.get("backup_settings"))
        if backup_settings is not None:
            request.backupSettings = expand_backup_settings(backup_settings)

        data_volume = _first_block(tree.get("data_volume"))
        if data_volume is not None:
            request.dataVolumeType = data_volume.get("type")
            request.dataVolumeSize = data_volume.get("size")
            if request.dataVolumeType == VOLUME_TYPE_IO2:
                request.dataVolumeIops = data_volume.get("iops")

        if is_set(tree.get("network_interface_ids")):
            request.networkInterfaceIds = sorted(tree["network_interface_ids"])
        else:
            request.subnetIds = sorted(tree.get("subnet_ids") or [])

        if tree.get("ssh_key_name"):
            request.sshKeyName = tree["ssh_key_name"]

        if tree.get("user_data"):
            request.userData = tree["user_data"]
            request.userDataContentType = tree.get("user_data_content_type")

        return request

    def read(self, service_id: str, is_new: bool = False) -> Optional[Dict[str, Any]]:
        """Read a service into resource data.

        Returns:
            Resource data, or None if the service no longer exists and should
            be removed from state
        """
        try:
            service = find_service_by_id(self.client, service_id)
        except PaaSProviderError as e:
            if not is_new and is_not_found(e):
                logger.warning(f"PaaS Service ({service_id}) not found, removing from state")
                return None
            raise ServiceOperationError(
                f"error reading PaaS Service ({service_id}): {e}",
                service_id=service_id, operation='read', cause=e
            )

        return self.flatten_service(service)

    def flatten_service(self, service: Service) -> Dict[str, Any]:
        """Convert a described service into resource data."""
        data: Dict[str, Any] = {"id": service.id}

        backup_settings = flatten_backup_settings(service.backupSettings)
        if backup_settings:
            data["backup_settings"] = backup_settings

        data["data_volume"] = _flatten_volume(
            service.dataVolumeType, service.dataVolumeSize, service.dataVolumeIops
        )
        data["endpoints"] = set(service.endpoints or [])
        data["error_code"] = service.errorCode
        data["error_description"] = service.errorDescription
        data["high_availability"] = service.highAvailability
        data["instances"] = flatten_instances(service.instances)
        data["instance_type"] = service.instanceType
        data["name"] = service.name
        data["network_interface_ids"] = set(service.networkInterfaceIds or [])

        service_type = service.serviceType or ""
        manager = self.registry.manager(service_type)
        if manager is not None:
            block = manager.flatten_service_parameters_users_databases(
                service.parameters, service.users, service.databases
            )
            block["class"] = service.serviceClass
            data[service_type] = [block]

        data["root_volume"] = _flatten_volume(
            service.rootVolumeType, service.rootVolumeSize, service.rootVolumeIops
        )

        auto_created, security_group_ids = set(), set()
        for security_group in service.securityGroups or []:
            if security_group.createdAutomatically:
                auto_created.add(security_group.id)
            else:
                security_group_ids.add(security_group.id)
        data["auto_created_security_group_ids"] = auto_created
        data["security_group_ids"] = security_group_ids

        data["service_class"] = service.serviceClass
        data["service_type"] = service.serviceType
        data["ssh_key_name"] = service.sshKeyName
        data["status"] = service.status
        data["subnet_ids"] = set(service.subnetIds or [])
        data["supported_features"] = set(service.supportedFeatures or [])
        data["total_cpu_count"] = service.totalCpuCount
        data["total_memory"] = service.totalMemory

        return data

    def update(self, service_id: str, data: Dict[str, Any],
               previous: Optional[Dict[str, Any]] = None,
               cancel_event: Optional[threading.Event] = None) -> Optional[Dict[str, Any]]:
        """Modify backup settings, users and databases that differ from ``previous``.

        ``previous`` is the last known resource data; None treats everything
        declared as changed.
        """
        previous = previous or {}
        request = ModifyServiceInput(serviceId=service_id)

        if data.get("backup_settings") != previous.get("backup_settings"):
            backup_settings = _first_block(data.get("backup_settings"))
            if backup_settings is not None:
                request.backupSettings = expand_backup_settings(backup_settings)

        manager = self.manager_for(data)
        if manager is not None:
            block = _first_block(data.get(manager.service_type)) or {}
            previous_block = _first_block(previous.get(manager.service_type)) or {}

            if manager.users_enabled and block.get("user") != previous_block.get("user"):
                request.users = self._users(manager, block)

            if manager.databases_enabled and block.get("database") != previous_block.get("database"):
                request.databases = self._databases(manager, block)

        logger.debug(f"Modifying PaaS Service: {request.model_dump(exclude_none=True)}")
        try:
            self.client.modify_service(request)
        except PaaSProviderError as e:
            raise ServiceOperationError(
                f"error modifying PaaS Service ({service_id}): {e}",
                service_id=service_id, operation='update', cause=e
            )
        operation_logger.log_operation(service_id, 'update')

        try:
            wait_service_updated(self.client, service_id, wait_config=self.wait_config,
                                 cancel_event=cancel_event, **self.wait_options)
        except PaaSProviderError as e:
            raise ServiceOperationError(
                f"error waiting for PaaS Service ({service_id}) to update: {e}",
                service_id=service_id, operation='update', cause=e
            )

        return self.read(service_id, is_new=not previous)

    def _users(self, manager: ServiceManager, block: Dict[str, Any]) -> List[UserCreateRequest]:
        return manager.expand_users(block.get("user"), for_database=False) or []

    def _databases(self, manager: ServiceManager, block: Dict[str, Any]) -> List[DatabaseCreateRequest]:
        return manager.expand_databases(block.get("database")) or []

    def delete(self, service_id: str, data: Optional[Dict[str, Any]] = None,
               cancel_event: Optional[threading.Event] = None):
        """Delete a service and wait until it is gone."""
        data = data or {}
        request = DeleteServiceInput(
            serviceId=service_id,
            deleteInterfaces=bool(data.get("delete_interfaces_on_destroy", False)),
        )

        logger.debug(f"Deleting PaaS Service: {request.model_dump(exclude_none=True)}")
        try:
            self.client.delete_service(request)
        except PaaSProviderError as e:
            raise ServiceOperationError(
                f"error deleting PaaS Service ({service_id}): {e}",
                service_id=service_id, operation='delete', cause=e
            )
        operation_logger.log_operation(service_id, 'delete')

        try:
            wait_service_deleted(self.client, service_id, wait_config=self.wait_config,
                                 cancel_event=cancel_event, **self.wait_options)
        except PaaSProviderError as e:
            raise ServiceOperationError(
                f"error waiting for PaaS Service ({service_id}) to delete: {e}",
                service_id=service_id, operation='delete', cause=e
            )
