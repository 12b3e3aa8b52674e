"""Memcached service.

Memcached has no logging block and its ``monitoring`` is a plain boolean
parameter, so it replaces the default service parameter expansion entirely.
"""

from typing import Any, Dict, Optional

from paas_provider.services.base import ServiceManager, ServiceParameters
from paas_provider.services.fields import bool_field, expand_fields
from paas_provider.services.util import SERVICE_CLASS_CACHER, SERVICE_TYPE_MEMCACHED


def expand_memcached_parameters(manager: ServiceManager,
                                tree: Optional[Dict[str, Any]]) -> Optional[ServiceParameters]:
    return expand_fields(manager.service_fields, tree)


memcached = ServiceManager(
    name=SERVICE_TYPE_MEMCACHED,
    allowed_classes=(SERVICE_CLASS_CACHER,),
    default_class=SERVICE_CLASS_CACHER,
    allow_arbitrator=False,
    allow_backup=False,
    data_volume_required=True,
    users_enabled=False,
    databases_enabled=False,
    service_fields=(
        bool_field("monitoring", default=False),
    ),
    expand_service_parameters_override=expand_memcached_parameters,
)
