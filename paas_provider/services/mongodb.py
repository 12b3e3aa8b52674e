"""MongoDB service."""

from paas_provider.services.base import ServiceManager
from paas_provider.services.fields import (
    bool_field,
    dimensioned_field,
    int_field,
    map_field,
    set_field,
    string_field,
)
from paas_provider.services.parameter_values import MONGODB_DATABASE_USER_ROLES
from paas_provider.services.schema import AttributeType
from paas_provider.services.util import GIB, SERVICE_CLASS_DATABASE, SERVICE_TYPE_MONGODB
from paas_provider.services.validation import (
    float_at_least,
    int_between,
    string_does_not_contain_any,
    string_in_slice,
)

MONGODB_VERSIONS = ("3.6.23", "4.0.28", "4.2.23", "4.4.17", "5.0.13")

mongodb = ServiceManager(
    name=SERVICE_TYPE_MONGODB,
    allowed_classes=(SERVICE_CLASS_DATABASE,),
    default_class=SERVICE_CLASS_DATABASE,
    allow_arbitrator=True,
    allow_backup=False,
    data_volume_required=True,
    users_enabled=True,
    databases_enabled=True,
    logging_enabled=True,
    monitoring_enabled=True,
    service_fields=(
        int_field("journal_commit_interval", default=100, validators=(int_between(1, 500),)),
        int_field("maxconns", default=51200, validators=(int_between(10, 51200),)),
        map_field("options"),
        string_field(
            "profile",
            default="slowOp",
            validators=(string_in_slice(["off", "slowOp", "all"]),),
        ),
        int_field("slowms", omit_zero=False, default=100, validators=(int_between(0, 36000000),)),
        dimensioned_field(
            "storage_engine_cache_size",
            unit=GIB,
            attr_type=AttributeType.FLOAT,
            validators=(float_at_least(0.25),),
        ),
        # the API calls this parameter "verbose"
        bool_field("quiet", request_key="verbose", response_key="verbose", default=False),
        string_field(
            "verbositylevel",
            validators=(string_in_slice(["v", "vv", "vvv", "vvvv", "vvvvv"]),),
        ),
        string_field("version", required=True, validators=(string_in_slice(MONGODB_VERSIONS),)),
    ),
    user_fields=(
        string_field(
            "password",
            required=True,
            sensitive=True,
            validators=(string_does_not_contain_any("`'\"\\"),),
        ),
    ),
    database_user_fields=(
        set_field("roles", elem_validators=(string_in_slice(MONGODB_DATABASE_USER_ROLES),)),
    ),
)
