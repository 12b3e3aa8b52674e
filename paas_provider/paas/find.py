"""Lookups against the PaaS control plane."""

import logging

from paas_provider.clients.base import PaaSClient
from paas_provider.exceptions import EmptyResultError, NotFoundError, RemoteAPIError
from paas_provider.models.service import Service
from paas_provider.paas.consts import SERVICE_NOT_FOUND_CODE

logger = logging.getLogger(__name__)


def find_service_by_id(client: PaaSClient, service_id: str) -> Service:
    """Describe a single service.

    Raises:
        NotFoundError: if the API reports the service as missing.
        EmptyResultError: if the API returned no service.
        RemoteAPIError: for any other API failure.
    """
    request = {'serviceId': service_id}

    try:
        service = client.describe_service(service_id)
    except RemoteAPIError as e:
        if e.code == SERVICE_NOT_FOUND_CODE:
            logger.info(f"Service {service_id} not found")
            raise NotFoundError(last_request=request, cause=e)
        raise

    if service is None:
        raise EmptyResultError(last_request=request)

    return service
