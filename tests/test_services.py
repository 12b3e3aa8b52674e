"""Tests for per-service parameter expansion and flattening."""

import pytest

from paas_provider.models.service import (
    DatabaseCreateRequest,
    DatabaseResponse,
    UserCreateRequest,
    UserResponse,
)
from paas_provider.services.elasticsearch import elasticsearch
from paas_provider.services.memcached import memcached
from paas_provider.services.mongodb import mongodb
from paas_provider.services.mysql import mysql
from paas_provider.services.pgsql import pgsql
from paas_provider.services.rabbitmq import rabbitmq
from paas_provider.services.redis import redis
from paas_provider.services.schema import apply_defaults
from paas_provider.services.util import MEGABYTE


@pytest.fixture
def round_trip(to_response_parameters):
    """Expand a service block, echo it back as a response and flatten it."""
    def _round_trip(service_manager, tree):
        parameters = service_manager.expand_service_parameters(tree)
        response = to_response_parameters(service_manager.service_fields, parameters)
        return service_manager.flatten_service_parameters_users_databases(response)

    return _round_trip


def with_defaults(service_manager, tree):
    return apply_defaults(service_manager.resource_schema().block, tree)


class TestLoggingAndMonitoring:
    """Test the shared logging and monitoring blocks."""

    def test_flags_written_when_blocks_absent(self):
        """Test logging and monitoring are always sent, False when not declared."""
        parameters = rabbitmq.expand_service_parameters({"version": "3.9.16", "password": "rabbit-secret"})

        assert parameters["logging"] is False
        assert parameters["monitoring"] is False

    def test_logging_block_expanded(self):
        """Test the logging block moves into top-level parameters."""
        tree = {
            "version": "3.9.16",
            "logging": [{"log_to": "syslog", "logging_tags": {"rabbit", "prod"}}],
        }

        parameters = rabbitmq.expand_service_parameters(tree)

        assert parameters["logging"] is True
        assert parameters["log_to"] == "syslog"
        assert parameters["logging_tags"] == ["prod", "rabbit"]
        assert "logging" in tree

    def test_monitoring_block_expanded(self):
        """Test the monitoring block moves into top-level parameters."""
        tree = {
            "version": "3.9.16",
            "monitoring": [{"monitor_by": "prometheus", "monitoring_labels": {"env": "prod"}}],
        }

        parameters = rabbitmq.expand_service_parameters(tree)

        assert parameters["monitoring"] is True
        assert parameters["monitor_by"] == "prometheus"
        assert parameters["monitoring_labels"] == {"env": "prod"}

    def test_flatten_blocks(self):
        """Test response flags rebuild the singleton blocks."""
        response = {
            "version": "3.9.16",
            "logging": True,
            "logTo": "syslog",
            "loggingTags": ["prod"],
            "monitoring": True,
            "monitorBy": "prometheus",
            "monitoringLabels": {"env": "prod"},
        }

        tree = rabbitmq.flatten_service_parameters_users_databases(response)

        assert tree["logging"] == [{"log_to": "syslog", "logging_tags": {"prod"}}]
        assert tree["monitoring"] == [{"monitor_by": "prometheus", "monitoring_labels": {"env": "prod"}}]

    def test_flatten_disabled_blocks_omitted(self):
        """Test disabled logging and monitoring produce no blocks."""
        tree = rabbitmq.flatten_service_parameters_users_databases(
            {"version": "3.9.16", "logging": False, "monitoring": False}
        )

        assert "logging" not in tree
        assert "monitoring" not in tree

    def test_none_parameters(self):
        """Test a missing tree expands to None."""
        assert rabbitmq.expand_service_parameters(None) is None
        assert rabbitmq.flatten_service_parameters_users_databases(None) == {}


class TestMemcached:
    """Test Memcached, which has no logging block."""

    def test_monitoring_is_plain_boolean(self):
        """Test monitoring is sent as a parameter and nothing else is added."""
        assert memcached.expand_service_parameters({"monitoring": True}) == {"monitoring": True}
        assert memcached.expand_service_parameters({"monitoring": False}) == {"monitoring": False}

    def test_logging_block_ignored(self):
        """Test a logging block doesn't reach the request."""
        parameters = memcached.expand_service_parameters({"logging": [{"log_to": "syslog"}]})

        assert parameters == {}

    def test_flatten(self):
        """Test flatten keeps the boolean and builds no blocks."""
        tree = memcached.flatten_service_parameters_users_databases({"monitoring": True})

        assert tree == {"monitoring": True}


class TestRedis:
    """Test Redis parameter mapping."""

    def test_hyphenated_keys(self):
        """Test keys that keep their literal Redis names."""
        parameters = redis.expand_service_parameters({
            "version": "7.0.11",
            "maxmemory_policy": "allkeys-lru",
            "tcp_backlog": 1024,
            "tcp_keepalive": 0,
        })

        assert parameters["maxmemory-policy"] == "allkeys-lru"
        assert parameters["tcp-backlog"] == 1024
        assert parameters["tcp-keepalive"] == 0

    def test_zero_is_meaningful(self):
        """Test zero-valued Redis parameters are sent."""
        parameters = redis.expand_service_parameters({
            "version": "7.0.11",
            "timeout": 0,
            "persistence_aof": False,
            "persistence_rdb": False,
        })

        assert parameters["timeout"] == 0
        assert parameters["persistence_aof"] is False
        assert parameters["persistence_rdb"] is False

    def test_round_trip(self, round_trip):
        """Test a declared block survives expand and flatten."""
        tree = with_defaults(redis, {
            "version": "7.0.11",
            "password": "redis-password",
            "options": {"hz": "10"},
            "logging": [{"log_to": "syslog", "logging_tags": {"redis", "prod"}}],
        })

        flattened = round_trip(redis, tree)

        expected = dict(tree)
        del expected["class"]
        assert flattened == expected


class TestMongoDB:
    """Test MongoDB parameter mapping."""

    def test_quiet_is_sent_as_verbose(self):
        """Test the renamed quiet parameter."""
        parameters = mongodb.expand_service_parameters({"version": "5.0.13", "quiet": True})

        assert parameters["verbose"] is True
        assert "quiet" not in parameters

    def test_storage_engine_cache_size_in_gibibytes(self):
        """Test the cache size is sent in GiB."""
        parameters = mongodb.expand_service_parameters(
            {"version": "5.0.13", "storage_engine_cache_size": 1.5}
        )

        assert parameters["storage_engine_cache_size"] == {"dimension": "GiB", "value": 1.5}

    def test_slowms_zero_is_sent(self):
        """Test slowms=0 is a real value."""
        assert mongodb.expand_service_parameters({"version": "5.0.13", "slowms": 0})["slowms"] == 0

    def test_database_user_roles(self):
        """Test database users carry roles as a sorted list."""
        database = mongodb.expand_database({
            "name": "orders",
            "user": [{"name": "app", "roles": {"readWrite", "dbAdmin"}}],
        })

        assert database.name == "orders"
        assert database.users == [UserCreateRequest(name="app", parameters={"roles": ["dbAdmin", "readWrite"]})]
        assert database.parameters is None

    def test_round_trip(self, round_trip):
        """Test a declared block survives expand and flatten."""
        tree = with_defaults(mongodb, {
            "version": "5.0.13",
            "quiet": True,
            "storage_engine_cache_size": 0.5,
            "monitoring": [{"monitor_by": "prometheus", "monitoring_labels": {"team": "db"}}],
        })

        flattened = round_trip(mongodb, tree)

        expected = dict(tree)
        del expected["class"]
        expected["user"] = []
        expected["database"] = []
        assert flattened == expected


class TestMySQL:
    """Test MySQL parameter mapping."""

    def test_sentinels_not_sent(self):
        """Test sentinel defaults are left out of the request."""
        tree = with_defaults(mysql, {"vendor": "percona", "version": "8.0"})

        parameters = mysql.expand_service_parameters(tree)

        assert "gcs_fc_factor" not in parameters
        assert "innodb_thread_concurrency" not in parameters
        assert "thread_cache_size" not in parameters

    def test_sentinel_override_sent(self):
        """Test a value other than the sentinel is sent, including zero."""
        parameters = mysql.expand_service_parameters({
            "vendor": "percona",
            "version": "8.0",
            "thread_cache_size": 0,
            "gcs_fc_factor": 0.5,
        })

        assert parameters["thread_cache_size"] == 0
        assert parameters["gcs_fc_factor"] == 0.5

    def test_sentinel_idempotence(self):
        """Test missing sentinel fields flatten back to their sentinels."""
        tree = mysql.flatten_service_parameters_users_databases({"vendor": "percona", "version": "8.0"})

        assert tree["gcs_fc_factor"] == -1.0
        assert tree["innodb_thread_concurrency"] == -1
        assert tree["thread_cache_size"] == -1

    def test_dimensioned_sizes(self):
        """Test sizes are sent in bytes and read back from any unit."""
        parameters = mysql.expand_service_parameters({
            "vendor": "percona",
            "version": "8.0",
            "innodb_buffer_pool_size": 256 * MEGABYTE,
        })
        tree = mysql.flatten_service_parameters_users_databases({
            "innodbBufferPoolSize": {"dimension": "MiB", "value": 256},
        })

        assert parameters["innodb_buffer_pool_size"] == {"dimension": "B", "value": 268435456}
        assert tree["innodb_buffer_pool_size"] == 268435456

    def test_flush_log_zero_is_sent(self):
        """Test innodb_flush_log_at_trx_commit=0 is sent."""
        parameters = mysql.expand_service_parameters(
            {"vendor": "mysql", "version": "8.0", "innodb_flush_log_at_trx_commit": 0}
        )

        assert parameters["innodb_flush_log_at_trx_commit"] == 0

    def test_nullable_booleans(self):
        """Test tri-state Galera flags."""
        parameters = mysql.expand_service_parameters({
            "vendor": "percona",
            "version": "8.0",
            "gcs_fc_master_slave": "true",
            "gcs_fc_single_primary": "",
        })
        tree = mysql.flatten_service_parameters_users_databases({"gcsFcSinglePrimary": False})

        assert parameters["gcs_fc_master_slave"] is True
        assert "gcs_fc_single_primary" not in parameters
        assert tree["gcs_fc_single_primary"] == "false"
        assert "gcs_fc_master_slave" not in tree

    def test_expand_users(self):
        """Test users become request objects and junk entries are skipped."""
        users = mysql.expand_users([
            {"name": "app", "password": "app-password", "host": "%"},
            "junk",
        ])

        assert users == [UserCreateRequest(name="app", parameters={"host": "%", "password": "app-password"})]

    def test_expand_empty_users(self):
        """Test an empty user list expands to None."""
        assert mysql.expand_users([]) is None
        assert mysql.expand_databases([]) is None

    def test_expand_database(self):
        """Test a database with nested users and parameters."""
        tree = {
            "name": "shop",
            "backup_enabled": True,
            "charset": "utf8mb4",
            "user": [{"name": "app", "privileges": {"SELECT", "INSERT"}, "options": {"GRANT"}}],
        }

        databases = mysql.expand_databases([tree])

        assert databases == [DatabaseCreateRequest(
            backupEnabled=True,
            name="shop",
            users=[UserCreateRequest(
                name="app",
                parameters={"options": ["GRANT"], "privileges": ["INSERT", "SELECT"]},
            )],
            parameters={"charset": "utf8mb4"},
        )]
        assert "user" in tree

    def test_flatten_users_and_databases(self):
        """Test users and databases flatten with their ids."""
        users = [UserResponse(id="u-1", name="app", parameters={"host": "%"})]
        databases = [DatabaseResponse(
            id="d-1",
            name="shop",
            backupEnabled=False,
            users=[UserResponse(id="u-1", name="app", parameters={"privileges": ["SELECT"]})],
            parameters={"charset": "utf8"},
        )]

        tree = mysql.flatten_service_parameters_users_databases({}, users, databases)

        assert tree["user"] == [{"id": "u-1", "name": "app", "host": "%"}]
        assert tree["database"] == [{
            "backup_enabled": False,
            "id": "d-1",
            "name": "shop",
            "user": [{"id": "u-1", "name": "app", "privileges": {"SELECT"}}],
            "charset": "utf8",
        }]

    def test_flatten_no_users_or_databases(self):
        """Test missing users and databases flatten to empty lists."""
        tree = mysql.flatten_service_parameters_users_databases(None)

        assert tree == {"user": [], "database": []}

    def test_round_trip(self, round_trip):
        """Test a declared block survives expand and flatten."""
        tree = with_defaults(mysql, {
            "vendor": "percona",
            "version": "8.0",
            "innodb_buffer_pool_size": 256 * MEGABYTE,
            "galera_options": {"gcs.fc_limit": "16"},
        })

        flattened = round_trip(mysql, tree)

        expected = dict(tree)
        del expected["class"]
        expected["user"] = []
        expected["database"] = []
        assert flattened == expected


class TestPostgreSQL:
    """Test PostgreSQL parameter mapping."""

    def test_zero_is_meaningful(self):
        """Test zero-valued worker settings are sent."""
        parameters = pgsql.expand_service_parameters({
            "version": "14.4",
            "effective_io_concurrency": 0,
            "max_parallel_workers": 0,
            "max_parallel_workers_per_gather": 0,
            "max_worker_processes": 0,
        })

        assert parameters["effective_io_concurrency"] == 0
        assert parameters["max_parallel_workers"] == 0
        assert parameters["max_parallel_workers_per_gather"] == 0
        assert parameters["max_worker_processes"] == 0

    def test_sentinels(self):
        """Test sentinel defaults are left out and -1 cost limit is sent."""
        tree = with_defaults(pgsql, {"version": "14.4"})

        parameters = pgsql.expand_service_parameters(tree)

        assert "max_parallel_maintenance_workers" not in parameters
        assert "wal_keep_segments" not in parameters
        assert parameters["autovacuum_vacuum_cost_limit"] == -1

    def test_database_extensions(self):
        """Test databases carry owner and sorted extensions."""
        database = pgsql.expand_database({
            "name": "geo",
            "owner": "app",
            "extensions": {"postgis", "hstore"},
        })

        assert database.parameters == {"extensions": ["hstore", "postgis"], "owner": "app"}

    def test_round_trip(self, round_trip):
        """Test a declared block survives expand and flatten."""
        tree = with_defaults(pgsql, {
            "version": "14.4",
            "replication_mode": "synchronous",
            "max_parallel_workers": 0,
        })

        flattened = round_trip(pgsql, tree)

        expected = dict(tree)
        del expected["class"]
        expected["user"] = []
        expected["database"] = []
        assert flattened == expected


class TestElasticsearch:
    """Test Elasticsearch parameter mapping."""

    def test_kibana_false_is_sent(self):
        """Test kibana is always sent."""
        parameters = elasticsearch.expand_service_parameters({"version": "8.2.2", "kibana": False})

        assert parameters["kibana"] is False

    def test_round_trip(self, round_trip):
        """Test a declared block survives expand and flatten."""
        tree = with_defaults(elasticsearch, {"version": "8.2.2", "kibana": True, "password": "elastic-pw"})

        flattened = round_trip(elasticsearch, tree)

        expected = dict(tree)
        del expected["class"]
        assert flattened == expected
