"""RabbitMQ service."""

from paas_provider.services.base import ServiceManager
from paas_provider.services.fields import map_field, string_field
from paas_provider.services.util import SERVICE_CLASS_MESSAGE_BROKER, SERVICE_TYPE_RABBITMQ
from paas_provider.services.validation import (
    all_of,
    string_does_not_contain_any,
    string_in_slice,
    string_len_between,
)

rabbitmq = ServiceManager(
    name=SERVICE_TYPE_RABBITMQ,
    allowed_classes=(SERVICE_CLASS_MESSAGE_BROKER,),
    default_class=SERVICE_CLASS_MESSAGE_BROKER,
    allow_arbitrator=False,
    allow_backup=False,
    data_volume_required=True,
    users_enabled=False,
    databases_enabled=False,
    logging_enabled=True,
    monitoring_enabled=True,
    service_fields=(
        map_field("options"),
        string_field(
            "password",
            required=True,
            sensitive=True,
            validators=(all_of(string_len_between(8, 128), string_does_not_contain_any("`'\"\\")),),
        ),
        string_field(
            "version",
            required=True,
            omit_zero=False,
            validators=(string_in_slice(["3.8.30", "3.9.16", "3.10.0"]),),
        ),
    ),
)
