"""MySQL service (MySQL, Percona and MariaDB vendors)."""

from paas_provider.services.base import ServiceManager
from paas_provider.services.fields import (
    dimensioned_field,
    int_field,
    map_field,
    nullable_bool_field,
    sentinel_field,
    set_field,
    string_field,
)
from paas_provider.services.parameter_values import (
    MYSQL_DATABASE_USER_OPTIONS,
    MYSQL_DATABASE_USER_PRIVILEGES,
    MYSQL_GCS_FC_FACTOR_DEFAULT,
    MYSQL_INNODB_THREAD_CONCURRENCY_DEFAULT,
    MYSQL_THREAD_CACHE_SIZE_DEFAULT,
)
from paas_provider.services.schema import AttributeType
from paas_provider.services.util import (
    GIGABYTE,
    KILOBYTE,
    MEGABYTE,
    SERVICE_CLASS_DATABASE,
    SERVICE_TYPE_MYSQL,
)
from paas_provider.services.validation import (
    float_between,
    int_at_least,
    int_between,
    string_does_not_contain_any,
    string_in_slice,
    string_len_between,
)

# 2^62-1, the largest bound the host schema engine handles
MAX_INT = 4611686018427387903

mysql = ServiceManager(
    name=SERVICE_TYPE_MYSQL,
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
        int_field("connect_timeout", default=10, validators=(int_between(2, 31536000),)),
        map_field("galera_options"),
        dimensioned_field("gcache_size", validators=(int_at_least(128 * MEGABYTE),)),
        sentinel_field(
            "gcs_fc_factor",
            MYSQL_GCS_FC_FACTOR_DEFAULT,
            attr_type=AttributeType.FLOAT,
            validators=(float_between(0.0, 1.0),),
        ),
        int_field("gcs_fc_limit", validators=(int_between(1, 2147483647),)),
        nullable_bool_field("gcs_fc_master_slave"),
        nullable_bool_field("gcs_fc_single_primary"),
        int_field("innodb_buffer_pool_instances", validators=(int_between(1, 64),)),
        dimensioned_field(
            "innodb_buffer_pool_size",
            default=128 * MEGABYTE,
            validators=(int_between(5 * MEGABYTE, MAX_INT),),
        ),
        string_field(
            "innodb_change_buffering",
            validators=(string_in_slice(["inserts", "deletes", "changes", "purges", "all", "none"]),),
        ),
        int_field(
            "innodb_flush_log_at_trx_commit",
            omit_zero=False,
            default=1,
            validators=(int_between(0, 2),),
        ),
        int_field("innodb_io_capacity", default=200, validators=(int_between(100, MAX_INT),)),
        int_field("innodb_io_capacity_max", validators=(int_between(100, MAX_INT),)),
        dimensioned_field("innodb_log_file_size", validators=(int_between(4 * MEGABYTE, 512 * GIGABYTE),)),
        int_field("innodb_log_files_in_group", default=2, validators=(int_between(2, 100),)),
        int_field("innodb_purge_threads", default=4, validators=(int_between(1, 32),)),
        sentinel_field(
            "innodb_thread_concurrency",
            MYSQL_INNODB_THREAD_CONCURRENCY_DEFAULT,
            validators=(int_between(0, 1000),),
        ),
        string_field("innodb_strict_mode", default="OFF", validators=(string_in_slice(["ON", "OFF"]),)),
        int_field("innodb_sync_array_size", validators=(int_between(1, 1024),)),
        dimensioned_field(
            "max_allowed_packet",
            default=16 * MEGABYTE,
            validators=(int_between(16 * MEGABYTE, 1 * GIGABYTE),),
        ),
        int_field("max_connect_errors", default=100, validators=(int_between(1, MAX_INT),)),
        int_field("max_connections", default=151, validators=(int_between(1, 100000),)),
        dimensioned_field(
            "max_heap_table_size",
            default=16 * MEGABYTE,
            validators=(int_between(16 * KILOBYTE, 4294966272),),
        ),
        map_field("options"),
        string_field(
            "pxc_strict_mode",
            validators=(string_in_slice(["DISABLED", "PERMISSIVE", "ENFORCING", "MASTER"]),),
        ),
        int_field("table_open_cache", validators=(int_between(1, 1048576),)),
        sentinel_field(
            "thread_cache_size",
            MYSQL_THREAD_CACHE_SIZE_DEFAULT,
            validators=(int_between(0, 16 * KILOBYTE),),
        ),
        dimensioned_field(
            "tmp_table_size",
            default=16 * MEGABYTE,
            validators=(int_between(1 * KILOBYTE, 4294967295),),
        ),
        string_field(
            "transaction_isolation",
            default="REPEATABLE-READ",
            validators=(string_in_slice([
                "READ-UNCOMMITTED",
                "READ-COMMITTED",
                "REPEATABLE-READ",
                "SERIALIZABLE",
            ]),),
        ),
        string_field("vendor", required=True, validators=(string_in_slice(["mariadb", "percona", "mysql"]),)),
        # TODO: restrict versions per vendor once the API publishes the supported matrix
        string_field("version", required=True),
        int_field("wait_timeout", default=28800, validators=(int_between(1, 31536000),)),
    ),
    user_fields=(
        string_field("host", validators=(string_len_between(1, 60),)),
        string_field(
            "password",
            required=True,
            sensitive=True,
            validators=(string_does_not_contain_any("`'\"\\"),),
        ),
    ),
    database_fields=(
        string_field("backup_id"),
        string_field("backup_db_name"),
        string_field("charset", default="utf8"),
        string_field("collate", default="utf8_unicode_ci"),
    ),
    database_user_fields=(
        set_field("options", elem_validators=(string_in_slice(MYSQL_DATABASE_USER_OPTIONS),)),
        set_field("privileges", elem_validators=(string_in_slice(MYSQL_DATABASE_USER_PRIVILEGES),)),
    ),
)
