"""
Service Catalog Repository Interfaces
=====================================
"""
from abc import abstractmethod
from typing import Optional

from servicedesk.domain.models.service_catalog import ServiceCatalogItem, ServiceRequest
from servicedesk.domain.repositories.base_repository import TenantRepository


class ServiceCatalogRepository(TenantRepository[ServiceCatalogItem]):

    @abstractmethod
    def find_by_service_id(self, organization_id: str, service_id: str) -> Optional[ServiceCatalogItem]:
        """Find a catalog item by its service id."""
        pass

    @abstractmethod
    def increment_requests(self, item_id: str) -> None:
        """Bump the request counter of a catalog item."""
        pass


class ServiceRequestRepository(TenantRepository[ServiceRequest]):

    @abstractmethod
    def find_by_ticket_id(self, organization_id: str, request_id: str) -> Optional[ServiceRequest]:
        """Find a service request by its ticket id (SRQ-YYYY-NNNNN)."""
        pass
