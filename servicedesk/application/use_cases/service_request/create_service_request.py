"""
Create Service Request Use Case
===============================

Orders a catalog item on behalf of a user.
"""
import logging
from typing import Any, Dict, Optional

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.itsm_constants import Priority, ServiceRequestStatus, TicketPrefix
from servicedesk.domain.models.itsm_common import PersonRef
from servicedesk.domain.models.service_catalog import RequestApproval, ServiceCatalogItem, ServiceRequest
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.service_catalog_repository import (
    ServiceCatalogRepository,
    ServiceRequestRepository,
)
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.domain.services import sla_calculator
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.utils.datetime_utils import now
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)

# Service requests without an SLA policy on their catalog item
DEFAULT_RESPONSE_HOURS = 4
DEFAULT_RESOLUTION_HOURS = 24


class CreateServiceRequestUseCase:
    """
    Use case for creating a service request.

    Requests for items that require approval start in pending_approval
    with one step per approver in the chain; others start submitted.
    """

    def __init__(
        self,
        request_repository: ServiceRequestRepository,
        catalog_repository: ServiceCatalogRepository,
        sla_repository: SLARepository,
        generate_ticket_id: GenerateTicketIdUseCase,
    ):
        self._requests = request_repository
        self._catalog = catalog_repository
        self._slas = sla_repository
        self._ticket_ids = generate_ticket_id

    def execute(
        self,
        organization_id: str,
        requester: User,
        service_id: str,
        form_data: Optional[Dict[str, Any]] = None,
        priority: str = Priority.MEDIUM,
        site_id: Optional[str] = None,
    ) -> ServiceRequest:
        """
        Args:
            service_id: Catalog item id or its SVC id

        Raises:
            NotFoundError: If the catalog item does not exist
            ValidationError: If the catalog item is inactive
        """
        item = self._find_item(organization_id, service_id)
        if not item.is_active():
            raise ValidationError(f"Service '{item.name}' is not available for requests")

        created_at = now()
        steps = item.approval_steps()
        request = ServiceRequest(
            id=new_id(),
            request_id=self._ticket_ids.execute(TicketPrefix.SERVICE_REQUEST),
            organization_id=organization_id,
            service_id=item.service_id,
            service_name=item.name,
            status=ServiceRequestStatus.PENDING_APPROVAL if steps else ServiceRequestStatus.SUBMITTED,
            priority=priority,
            requester=PersonRef.of(requester),
            form_data=form_data or {},
            approval_status=RequestApproval(current_step=1, total_steps=steps),
            sla=self._sla_for(item, priority, created_at),
            site_id=site_id,
            created_at=created_at,
            updated_at=created_at,
        )
        request.add_event("Request Submitted", requester.id, requester.name)

        created = self._requests.create(request)
        self._catalog.increment_requests(item.id)
        logger.info("Service request created: %s for %s (%d approval step(s))", created.request_id, item.service_id, steps)
        return created

    def _find_item(self, organization_id: str, service_id: str) -> ServiceCatalogItem:
        item = (
            self._catalog.find_in_organization(organization_id, service_id)
            or self._catalog.find_by_service_id(organization_id, service_id)
        )
        if item is None:
            raise NotFoundError.for_resource("Service", service_id)
        return item

    def _sla_for(self, item: ServiceCatalogItem, priority: str, created_at):
        if item.workflow.sla_id:
            policy = self._slas.find_by_sla_id(item.organization_id, item.workflow.sla_id)
            if policy is not None:
                return sla_calculator.calculate_sla(priority, created_at, policy)
        return sla_calculator.fixed_sla(created_at, DEFAULT_RESPONSE_HOURS, DEFAULT_RESOLUTION_HOURS)
