"""Abstract base class for the PaaS control-plane client."""

from abc import ABC, abstractmethod
from typing import List, Optional

from paas_provider.models.service import (
    Service,
    CreateServiceInput,
    ModifyServiceInput,
    DeleteServiceInput,
)


class PaaSClient(ABC):
    """Synchronous client for the PaaS control-plane API.

    Implementations raise ``RemoteAPIError`` with the API error code on
    failure; ``Document.NotFound`` marks a missing service.
    """

    @abstractmethod
    def describe_service(self, service_id: str) -> Optional[Service]:
        """Fetch a single service."""
        pass

    @abstractmethod
    def create_service(self, request: CreateServiceInput) -> Service:
        """Start creating a service."""
        pass

    @abstractmethod
    def modify_service(self, request: ModifyServiceInput) -> Service:
        """Start modifying a service."""
        pass

    @abstractmethod
    def delete_service(self, request: DeleteServiceInput) -> Service:
        """Start deleting a service."""
        pass

    @abstractmethod
    def list_services(self) -> List[Service]:
        """List all services visible to the caller."""
        pass
