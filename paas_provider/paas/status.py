"""Single-shot status probes."""

from typing import Callable, Optional, Tuple

from paas_provider.clients.base import PaaSClient
from paas_provider.exceptions import is_not_found
from paas_provider.models.service import Service
from paas_provider.paas.find import find_service_by_id

StatusProbe = Callable[[], Tuple[Optional[Service], str]]


def status_service(client: PaaSClient, service_id: str) -> StatusProbe:
    """Return a probe reporting the current service and its status.

    A missing service is reported as ``(None, "")``; other errors propagate.
    """
    def probe() -> Tuple[Optional[Service], str]:
        try:
            service = find_service_by_id(client, service_id)
        except Exception as e:
            if is_not_found(e):
                return None, ""
            raise

        return service, service.status or ""

    return probe
