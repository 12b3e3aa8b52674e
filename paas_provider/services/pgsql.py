"""PostgreSQL service."""

from paas_provider.services.base import ServiceManager
from paas_provider.services.fields import (
    dimensioned_field,
    float_field,
    int_field,
    map_field,
    sentinel_field,
    set_field,
    string_field,
)
from paas_provider.services.parameter_values import (
    POSTGRESQL_DATABASE_EXTENSIONS,
    POSTGRESQL_DATABASE_LOCALES,
    POSTGRESQL_MAX_PARALLEL_MAINTENANCE_WORKERS_DEFAULT,
    POSTGRESQL_WAL_KEEP_SEGMENTS_DEFAULT,
)
from paas_provider.services.util import (
    GIGABYTE,
    KILOBYTE,
    MEGABYTE,
    SERVICE_CLASS_DATABASE,
    SERVICE_TYPE_POSTGRESQL,
)
from paas_provider.services.validation import (
    all_of,
    any_of,
    float_between,
    int_between,
    int_divisible_by,
    int_in_slice,
    string_does_not_contain_any,
    string_in_slice,
    string_len_between,
)

POSTGRESQL_VERSIONS = ("10.21", "11.16", "12.11", "13.7", "14.4", "15.2")

pgsql = ServiceManager(
    name=SERVICE_TYPE_POSTGRESQL,
    allowed_classes=(SERVICE_CLASS_DATABASE,),
    default_class=SERVICE_CLASS_DATABASE,
    allow_arbitrator=True,
    allow_backup=True,
    data_volume_required=True,
    users_enabled=True,
    databases_enabled=True,
    logging_enabled=True,
    monitoring_enabled=True,
    service_fields=(
        string_field("autovacuum", default="ON", validators=(string_in_slice(["ON", "OFF"]),)),
        int_field("autovacuum_max_workers", default=3, validators=(int_between(1, 262143),)),
        int_field(
            "autovacuum_vacuum_cost_delay",
            validators=(any_of(int_in_slice([-1]), int_between(1, 100)),),
        ),
        # -1 is a valid value here and is sent as is
        int_field(
            "autovacuum_vacuum_cost_limit",
            default=-1,
            validators=(any_of(int_in_slice([-1]), int_between(1, 10000)),),
        ),
        float_field("autovacuum_analyze_scale_factor", default=0.1, validators=(float_between(0, 100),)),
        float_field("autovacuum_vacuum_scale_factor", default=0.2, validators=(float_between(0, 100),)),
        int_field("effective_cache_size", default=524288, validators=(int_between(1, 2147483647),)),
        int_field(
            "effective_io_concurrency",
            omit_zero=False,
            default=1,
            validators=(int_between(0, 1000),),
        ),
        dimensioned_field(
            "maintenance_work_mem",
            default=64 * MEGABYTE,
            validators=(all_of(int_between(1 * MEGABYTE, 2 * GIGABYTE), int_divisible_by(KILOBYTE)),),
        ),
        int_field("max_connections", default=100, validators=(int_between(1, 262143),)),
        dimensioned_field(
            "max_wal_size",
            default=1 * GIGABYTE,
            validators=(all_of(int_between(2 * MEGABYTE, 2147483647 * MEGABYTE), int_divisible_by(MEGABYTE)),),
        ),
        sentinel_field(
            "max_parallel_maintenance_workers",
            POSTGRESQL_MAX_PARALLEL_MAINTENANCE_WORKERS_DEFAULT,
            validators=(int_between(0, 1024),),
        ),
        int_field("max_parallel_workers", omit_zero=False, default=8, validators=(int_between(0, 1024),)),
        int_field(
            "max_parallel_workers_per_gather",
            omit_zero=False,
            default=2,
            validators=(int_between(0, 1024),),
        ),
        int_field("max_worker_processes", omit_zero=False, default=8, validators=(int_between(0, 262143),)),
        dimensioned_field(
            "min_wal_size",
            default=80 * MEGABYTE,
            validators=(all_of(int_between(32 * MEGABYTE, 2147483647 * MEGABYTE), int_divisible_by(MEGABYTE)),),
        ),
        map_field("options"),
        string_field(
            "replication_mode",
            validators=(string_in_slice(["asynchronous", "synchronous", "synchronous_strict"]),),
        ),
        int_field("shared_buffers", default=1024, validators=(int_between(16, 1073741823),)),
        string_field("version", required=True, validators=(string_in_slice(POSTGRESQL_VERSIONS),)),
        sentinel_field(
            "wal_keep_segments",
            POSTGRESQL_WAL_KEEP_SEGMENTS_DEFAULT,
            validators=(int_between(0, 2147483647),),
        ),
        int_field("wal_buffers", validators=(int_between(8, 262143),)),
        dimensioned_field(
            "work_mem",
            default=4 * MEGABYTE,
            validators=(all_of(int_between(64 * KILOBYTE, 2147483647 * KILOBYTE), int_divisible_by(KILOBYTE)),),
        ),
    ),
    user_fields=(
        string_field(
            "password",
            required=True,
            sensitive=True,
            validators=(all_of(string_len_between(8, 128), string_does_not_contain_any("`'\"\\")),),
        ),
    ),
    database_fields=(
        string_field("backup_id"),
        string_field("backup_db_name"),
        # TODO: validate encoding against the selected locale
        string_field("encoding", default="UTF8"),
        set_field("extensions", elem_validators=(string_in_slice(POSTGRESQL_DATABASE_EXTENSIONS),)),
        string_field("locale", default="ru_RU.UTF-8", validators=(string_in_slice(POSTGRESQL_DATABASE_LOCALES),)),
        string_field("owner", required=True),
    ),
)
