"""Elasticsearch service."""

from paas_provider.services.base import ServiceManager
from paas_provider.services.fields import bool_field, map_field, string_field
from paas_provider.services.util import SERVICE_CLASS_SEARCH, SERVICE_TYPE_ELASTICSEARCH
from paas_provider.services.validation import (
    all_of,
    string_does_not_contain_any,
    string_in_slice,
    string_len_between,
)

ELASTICSEARCH_VERSIONS = (
    "7.11.2",
    "7.12.1",
    "7.13.1",
    "7.14.2",
    "7.15.2",
    "7.16.3",
    "7.17.4",
    "8.0.1",
    "8.1.3",
    "8.2.2",
)

elasticsearch = ServiceManager(
    name=SERVICE_TYPE_ELASTICSEARCH,
    allowed_classes=(SERVICE_CLASS_SEARCH,),
    default_class=SERVICE_CLASS_SEARCH,
    allow_arbitrator=True,
    allow_backup=False,
    data_volume_required=True,
    users_enabled=False,
    databases_enabled=False,
    logging_enabled=True,
    monitoring_enabled=True,
    service_fields=(
        bool_field("kibana", default=False),
        map_field("options"),
        string_field(
            "password",
            sensitive=True,
            validators=(all_of(string_len_between(7, 129), string_does_not_contain_any("^-!:;%'`\"\\")),),
        ),
        string_field(
            "version",
            required=True,
            omit_zero=False,
            validators=(string_in_slice(ELASTICSEARCH_VERSIONS),),
        ),
    ),
)
