"""Resource and data source shapes for service blocks."""

from typing import Dict, Iterable, Tuple

from paas_provider.services.base import ServiceManager
from paas_provider.services.fields import ParameterField
from paas_provider.services.schema import Attribute, AttributeType
from paas_provider.services.validation import string_in_slice

MAX_USERS = 1000
MAX_DATABASES = 1000


def _resource_fields(fields: Tuple[ParameterField, ...], force_new: bool = False) -> Dict[str, Attribute]:
    return {f.name: f.resource_attribute(force_new=force_new) for f in fields}


def _data_source_fields(fields: Tuple[ParameterField, ...]) -> Dict[str, Attribute]:
    return {f.name: f.data_source_attribute() for f in fields}


def logging_schema() -> Attribute:
    return Attribute(
        type=AttributeType.LIST,
        optional=True,
        force_new=True,
        max_items=1,
        elem={
            "log_to": Attribute(type=AttributeType.STRING, optional=True),
            "logging_tags": Attribute(
                type=AttributeType.SET,
                optional=True,
                elem=Attribute(type=AttributeType.STRING),
            ),
        },
    )


def monitoring_schema() -> Attribute:
    return Attribute(
        type=AttributeType.LIST,
        optional=True,
        force_new=True,
        max_items=1,
        elem={
            "monitor_by": Attribute(type=AttributeType.STRING, optional=True),
            "monitoring_labels": Attribute(
                type=AttributeType.MAP,
                optional=True,
                elem=Attribute(type=AttributeType.STRING),
            ),
        },
    )


def user_schema(fields: Tuple[ParameterField, ...]) -> Attribute:
    """User collection: ``id``, ``name`` and the service-specific user fields."""
    schema = {
        "id": Attribute(type=AttributeType.STRING, computed=True),
        "name": Attribute(type=AttributeType.STRING, required=True),
    }
    schema.update(_resource_fields(fields))

    return Attribute(
        type=AttributeType.LIST,
        optional=True,
        max_items=MAX_USERS,
        elem=schema,
    )


def database_schema(manager: ServiceManager) -> Attribute:
    """Database collection, with nested database users when the service has users."""
    schema = {
        "backup_enabled": Attribute(type=AttributeType.BOOL, optional=True, default=False),
        "id": Attribute(type=AttributeType.STRING, computed=True),
        "name": Attribute(type=AttributeType.STRING, required=True),
    }

    if manager.users_enabled:
        schema["user"] = user_schema(manager.database_user_fields)

    schema.update(_resource_fields(manager.database_fields))

    return Attribute(
        type=AttributeType.LIST,
        optional=True,
        max_items=MAX_DATABASES,
        elem=schema,
    )


def service_block_schema(manager: ServiceManager) -> Dict[str, Attribute]:
    """Attributes inside the resource service block."""
    schema = {
        "class": Attribute(
            type=AttributeType.STRING,
            optional=True,
            default=manager.default_class,
            force_new=True,
            validators=(string_in_slice(manager.allowed_classes),),
        ),
    }
    schema.update(_resource_fields(manager.service_fields, force_new=True))

    if manager.logging_enabled:
        schema["logging"] = logging_schema()

    if manager.monitoring_enabled:
        schema["monitoring"] = monitoring_schema()

    if manager.users_enabled:
        schema["user"] = user_schema(manager.user_fields)

    if manager.databases_enabled:
        schema["database"] = database_schema(manager)

    return schema


def build_resource_schema(manager: ServiceManager, service_types: Iterable[str]) -> Attribute:
    """Full resource shape of a service block.

    Args:
        manager: Service to build the shape for
        service_types: Sibling service blocks, exactly one of which may be set

    Returns:
        Singleton list block attribute
    """
    required_with = []
    conflicts_with = []

    if manager.data_volume_required:
        required_with.append("data_volume")

    if not manager.allow_arbitrator:
        conflicts_with.append("arbitrator_required")

    if not manager.allow_backup:
        conflicts_with.append("backup_settings")

    return Attribute(
        type=AttributeType.LIST,
        optional=True,
        force_new=True,
        max_items=1,
        exactly_one_of=tuple(sorted(service_types)),
        conflicts_with=tuple(conflicts_with),
        required_with=tuple(required_with),
        elem=service_block_schema(manager),
    )


def _user_data_source_schema(fields: Tuple[ParameterField, ...]) -> Attribute:
    schema = {
        "id": Attribute(type=AttributeType.STRING, computed=True),
        "name": Attribute(type=AttributeType.STRING, computed=True),
    }
    schema.update(_data_source_fields(fields))

    return Attribute(type=AttributeType.SET, computed=True, elem=schema)


def _database_data_source_schema(manager: ServiceManager) -> Attribute:
    schema = {
        "backup_enabled": Attribute(type=AttributeType.BOOL, computed=True),
        "id": Attribute(type=AttributeType.STRING, computed=True),
        "name": Attribute(type=AttributeType.STRING, computed=True),
    }

    if manager.users_enabled:
        schema["user"] = _user_data_source_schema(manager.database_user_fields)

    schema.update(_data_source_fields(manager.database_fields))

    return Attribute(type=AttributeType.SET, computed=True, elem=schema)


def build_data_source_schema(manager: ServiceManager) -> Attribute:
    """Read-only shape of a service block; every attribute is computed."""
    schema = {
        "class": Attribute(type=AttributeType.STRING, computed=True),
    }
    schema.update(_data_source_fields(manager.service_fields))

    if manager.logging_enabled:
        schema["logging"] = Attribute(
            type=AttributeType.LIST,
            computed=True,
            elem={
                "log_to": Attribute(type=AttributeType.STRING, computed=True),
                "logging_tags": Attribute(
                    type=AttributeType.SET,
                    computed=True,
                    elem=Attribute(type=AttributeType.STRING),
                ),
            },
        )

    if manager.monitoring_enabled:
        schema["monitoring"] = Attribute(
            type=AttributeType.LIST,
            computed=True,
            elem={
                "monitor_by": Attribute(type=AttributeType.STRING, computed=True),
                "monitoring_labels": Attribute(
                    type=AttributeType.MAP,
                    computed=True,
                    elem=Attribute(type=AttributeType.STRING),
                ),
            },
        )

    if manager.users_enabled:
        schema["user"] = _user_data_source_schema(manager.user_fields)

    if manager.databases_enabled:
        schema["database"] = _database_data_source_schema(manager)

    return Attribute(type=AttributeType.LIST, computed=True, elem=schema)
