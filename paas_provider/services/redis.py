"""Redis service.

Several Redis parameters keep their literal hyphenated config names on the
wire: ``maxmemory-policy``, ``tcp-backlog`` and ``tcp-keepalive``.
"""

from paas_provider.services.base import ServiceManager
from paas_provider.services.fields import bool_field, int_field, map_field, string_field
from paas_provider.services.util import (
    SERVICE_CLASS_CACHER,
    SERVICE_CLASS_DATABASE,
    SERVICE_TYPE_REDIS,
)
from paas_provider.services.validation import (
    all_of,
    int_at_least,
    int_between,
    string_does_not_contain_any,
    string_in_slice,
    string_len_between,
)

REDIS_MAXMEMORY_POLICIES = (
    "noeviction",
    "allkeys-lru",
    "allkeys-lfu",
    "volatile-lru",
    "volatile-lfu",
    "allkeys-random",
    "volatile-random",
    "volatile-ttl",
)

redis = ServiceManager(
    name=SERVICE_TYPE_REDIS,
    allowed_classes=(SERVICE_CLASS_DATABASE, SERVICE_CLASS_CACHER),
    default_class=SERVICE_CLASS_CACHER,
    allow_arbitrator=False,
    allow_backup=False,
    data_volume_required=True,
    users_enabled=False,
    databases_enabled=False,
    logging_enabled=True,
    monitoring_enabled=True,
    service_fields=(
        string_field("cluster_type", validators=(string_in_slice(["native", "sentinel"]),)),
        int_field("databases", validators=(int_between(1, 2147483647),)),
        string_field(
            "maxmemory_policy",
            request_key="maxmemory-policy",
            response_key="maxmemory-policy",
            default="noeviction",
            validators=(string_in_slice(REDIS_MAXMEMORY_POLICIES),),
        ),
        map_field("options"),
        string_field(
            "password",
            sensitive=True,
            validators=(all_of(string_len_between(8, 128), string_does_not_contain_any("`'\"\\")),),
        ),
        bool_field("persistence_aof", default=False),
        bool_field("persistence_rdb", default=False),
        int_field("timeout", omit_zero=False, default=0, validators=(int_between(0, 2147483647),)),
        int_field(
            "tcp_backlog",
            request_key="tcp-backlog",
            response_key="tcp-backlog",
            omit_zero=False,
            default=511,
            validators=(int_between(1, 4096),),
        ),
        int_field(
            "tcp_keepalive",
            request_key="tcp-keepalive",
            response_key="tcp-keepalive",
            omit_zero=False,
            default=300,
            validators=(int_at_least(0),),
        ),
        string_field(
            "version",
            required=True,
            omit_zero=False,
            validators=(string_in_slice(["5.0.14", "6.2.6", "7.0.11"]),),
        ),
    ),
)
