"""Service manager variant and the shared expand/flatten behaviour.

Expand converts the declarative tree into API request parameters, flatten
converts API responses back into the declarative tree.

Every service type is one immutable ``ServiceManager`` value holding its
metadata and parameter field tables. Behaviour shared by all services lives
in the module-level ``default_*`` helpers; a service that needs something
different passes an override callable that may call those helpers itself.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from paas_provider.models.service import (
    DatabaseCreateRequest,
    DatabaseResponse,
    UserCreateRequest,
    UserResponse,
)
from paas_provider.services.fields import ParameterField, expand_fields, flatten_fields
from paas_provider.services.schema import Attribute

ServiceParameters = Dict[str, Any]
UserParameters = Dict[str, Any]
DatabaseParameters = Dict[str, Any]
DatabaseUserParameters = Dict[str, Any]

ExpandOverride = Callable[['ServiceManager', Optional[Dict[str, Any]]], Optional[ServiceParameters]]


@dataclass(frozen=True)
class ServiceManager:
    """Schema shape and parameter conversion for one PaaS service type."""
    name: str
    allowed_classes: Tuple[str, ...]
    default_class: str
    allow_arbitrator: bool = False
    allow_backup: bool = False
    data_volume_required: bool = False
    users_enabled: bool = False
    databases_enabled: bool = False
    logging_enabled: bool = False
    monitoring_enabled: bool = False
    service_fields: Tuple[ParameterField, ...] = ()
    user_fields: Tuple[ParameterField, ...] = ()
    database_fields: Tuple[ParameterField, ...] = ()
    database_user_fields: Tuple[ParameterField, ...] = ()
    expand_service_parameters_override: Optional[ExpandOverride] = None

    @property
    def service_type(self) -> str:
        return self.name

    # Expand

    def expand_service_parameters(self, tree: Optional[Dict[str, Any]]) -> Optional[ServiceParameters]:
        """Convert the service block of the declarative tree to request parameters.

        The ``user`` and ``database`` collections are not part of the result;
        they are sent separately via ``expand_users`` and ``expand_databases``.
        """
        if self.expand_service_parameters_override is not None:
            return self.expand_service_parameters_override(self, tree)
        return default_expand_service_parameters(self, tree)

    def expand_users(self, tree_list: Optional[Iterable[Any]],
                     for_database: bool = False) -> Optional[List[UserCreateRequest]]:
        """Convert a list of declarative users to request objects."""
        if not tree_list:
            return None

        users = []
        for tree in tree_list:
            if not isinstance(tree, dict):
                continue

            user = self.expand_user(tree, for_database)
            if user is None:
                continue

            users.append(user)

        return users

    def expand_user(self, tree: Optional[Dict[str, Any]],
                    for_database: bool = False) -> Optional[UserCreateRequest]:
        """Convert a declarative user to a request object.

        Users attached to a database use the database user parameter fields.
        """
        if tree is None:
            return None

        tree = dict(tree)
        name = tree.get("name")
        if isinstance(name, str) and name:
            del tree["name"]
        else:
            name = None

        fields = self.database_user_fields if for_database else self.user_fields
        return UserCreateRequest(name=name, parameters=_expand_parameters(fields, tree))

    def expand_databases(self, tree_list: Optional[Iterable[Any]]) -> Optional[List[DatabaseCreateRequest]]:
        """Convert a list of declarative databases to request objects."""
        if not tree_list:
            return None

        databases = []
        for tree in tree_list:
            if not isinstance(tree, dict):
                continue

            database = self.expand_database(tree)
            if database is None:
                continue

            databases.append(database)

        return databases

    def expand_database(self, tree: Optional[Dict[str, Any]]) -> Optional[DatabaseCreateRequest]:
        """Convert a declarative database and its users to a request object."""
        if tree is None:
            return None

        tree = dict(tree)
        database = DatabaseCreateRequest()

        backup_enabled = tree.pop("backup_enabled", None)
        if isinstance(backup_enabled, bool):
            database.backupEnabled = backup_enabled

        name = tree.get("name")
        if isinstance(name, str) and name:
            database.name = name
            del tree["name"]

        users = tree.get("user")
        if isinstance(users, (list, tuple, set, frozenset)) and users:
            database.users = self.expand_users(users, for_database=True)
            del tree["user"]

        database.parameters = _expand_parameters(self.database_fields, tree)
        return database

    # Flatten

    def flatten_service_parameters_users_databases(
        self,
        parameters: Optional[ServiceParameters],
        users: Optional[List[UserResponse]] = None,
        databases: Optional[List[DatabaseResponse]] = None,
    ) -> Dict[str, Any]:
        """Convert the API representation of the whole service block to a declarative tree."""
        tree = flatten_fields(self.service_fields, parameters)

        if self.users_enabled:
            tree["user"] = self.flatten_users(users, for_database=False)

        if self.databases_enabled:
            tree["database"] = self.flatten_databases(databases)

        if self.logging_enabled:
            logging_block = flatten_logging(parameters)
            if logging_block is not None:
                tree["logging"] = logging_block

        if self.monitoring_enabled:
            monitoring_block = flatten_monitoring(parameters)
            if monitoring_block is not None:
                tree["monitoring"] = monitoring_block

        return tree

    def flatten_users(self, users: Optional[Iterable[Optional[UserResponse]]],
                      for_database: bool = False) -> List[Dict[str, Any]]:
        if not users:
            return []

        return [self.flatten_user(user, for_database) for user in users if user is not None]

    def flatten_user(self, user: Optional[UserResponse], for_database: bool = False) -> Dict[str, Any]:
        if user is None:
            return {}

        tree = {}

        if user.id is not None:
            tree["id"] = user.id

        if user.name is not None:
            tree["name"] = user.name

        fields = self.database_user_fields if for_database else self.user_fields
        tree.update(flatten_fields(fields, user.parameters))

        return tree

    def flatten_databases(self, databases: Optional[Iterable[Optional[DatabaseResponse]]]) -> List[Dict[str, Any]]:
        if not databases:
            return []

        return [self.flatten_database(database) for database in databases if database is not None]

    def flatten_database(self, database: Optional[DatabaseResponse]) -> Dict[str, Any]:
        if database is None:
            return {}

        tree = {}

        if database.backupEnabled is not None:
            tree["backup_enabled"] = database.backupEnabled

        if database.id is not None:
            tree["id"] = database.id

        if database.name is not None:
            tree["name"] = database.name

        if database.users is not None:
            tree["user"] = self.flatten_users(database.users, for_database=True)

        tree.update(flatten_fields(self.database_fields, database.parameters))

        return tree

    # Schema

    def resource_schema(self, service_types: Optional[Iterable[str]] = None) -> Attribute:
        """Shape of the service block for the resource.

        ``service_types`` lists the sibling service blocks of which exactly one
        may be set; it defaults to every registered service type.
        """
        from paas_provider.services.schema_builder import build_resource_schema

        if service_types is None:
            from paas_provider.services.registry import managed_service_types
            service_types = managed_service_types()

        return build_resource_schema(self, service_types)

    def data_source_schema(self) -> Attribute:
        """Shape of the service block for the data source."""
        from paas_provider.services.schema_builder import build_data_source_schema

        return build_data_source_schema(self)


def _expand_parameters(fields: Tuple[ParameterField, ...], tree: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not fields:
        return None
    return expand_fields(fields, tree)


def expand_logging(block: Any, parameters: ServiceParameters) -> None:
    """Move the ``logging`` singleton block into request parameters.

    The ``logging`` flag is always written, False when the block is absent.
    """
    if not isinstance(block, (list, tuple)) or not block:
        parameters["logging"] = False
        return

    logging_map = block[0] if isinstance(block[0], dict) else {}
    parameters["logging"] = True

    log_to = logging_map.get("log_to")
    if isinstance(log_to, str) and log_to:
        parameters["log_to"] = log_to

    tags = logging_map.get("logging_tags")
    if isinstance(tags, (list, tuple, set, frozenset)) and tags:
        parameters["logging_tags"] = sorted(tags)


def expand_monitoring(block: Any, parameters: ServiceParameters) -> None:
    """Move the ``monitoring`` singleton block into request parameters.

    The ``monitoring`` flag is always written, False when the block is absent.
    """
    if not isinstance(block, (list, tuple)) or not block:
        parameters["monitoring"] = False
        return

    monitoring_map = block[0] if isinstance(block[0], dict) else {}
    parameters["monitoring"] = True

    monitor_by = monitoring_map.get("monitor_by")
    if isinstance(monitor_by, str) and monitor_by:
        parameters["monitor_by"] = monitor_by

    labels = monitoring_map.get("monitoring_labels")
    if isinstance(labels, dict) and labels:
        parameters["monitoring_labels"] = dict(labels)


def flatten_logging(parameters: Optional[ServiceParameters]) -> Optional[List[Dict[str, Any]]]:
    if not parameters or parameters.get("logging") is not True:
        return None

    logging_map = {}

    log_to = parameters.get("logTo")
    if isinstance(log_to, str):
        logging_map["log_to"] = log_to

    tags = parameters.get("loggingTags")
    if isinstance(tags, (list, tuple, set, frozenset)):
        logging_map["logging_tags"] = set(tags)

    return [logging_map]


def flatten_monitoring(parameters: Optional[ServiceParameters]) -> Optional[List[Dict[str, Any]]]:
    if not parameters or parameters.get("monitoring") is not True:
        return None

    monitoring_map = {}

    monitor_by = parameters.get("monitorBy")
    if isinstance(monitor_by, str):
        monitoring_map["monitor_by"] = monitor_by

    labels = parameters.get("monitoringLabels")
    if isinstance(labels, dict):
        monitoring_map["monitoring_labels"] = dict(labels)

    return [monitoring_map]


def default_expand_service_parameters(manager: ServiceManager,
                                      tree: Optional[Dict[str, Any]]) -> Optional[ServiceParameters]:
    """Expand logging/monitoring blocks, then the manager's own service fields.

    The caller's tree is left untouched.
    """
    if tree is None:
        return None

    tree = dict(tree)
    parameters = {}

    if manager.logging_enabled:
        expand_logging(tree.pop("logging", None), parameters)

    if manager.monitoring_enabled:
        expand_monitoring(tree.pop("monitoring", None), parameters)

    parameters.update(expand_fields(manager.service_fields, tree))
    return parameters
