"""
Service Catalog Service
=======================

Catalog items and the service requests raised against them.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import AuthorizationError, NotFoundError, ValidationError
from servicedesk.domain.constants.itsm_constants import Priority, ServiceRequestStatus
from servicedesk.domain.constants.people_constants import NotificationType
from servicedesk.domain.models.itsm_common import Assignee
from servicedesk.domain.models.service_catalog import (
    Availability,
    CatalogWorkflow,
    Fulfillment,
    ServiceCatalogItem,
    ServiceRequest,
)
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.service_catalog_repository import (
    ServiceCatalogRepository,
    ServiceRequestRepository,
)
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.application.use_cases.service_request.create_service_request import CreateServiceRequestUseCase
from servicedesk.utils.id_utils import new_id, short_token

logger = logging.getLogger(__name__)

_ITEM_FIELDS = ("name", "description", "category", "icon", "form_fields", "tags", "order")


class ServiceCatalogService:
    """
    Application service for the service catalog.

    A pending request can be decided by the approver named on its current
    step, or by a manager when the step names nobody.
    """

    def __init__(
        self,
        catalog_repository: ServiceCatalogRepository,
        request_repository: ServiceRequestRepository,
        sla_repository: SLARepository,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
        notification_repository: NotificationRepository,
    ):
        self._catalog = catalog_repository
        self._requests = request_repository
        self._users = user_repository
        self._notify = SendNotificationUseCase(notification_repository)
        self._create_request_use_case = CreateServiceRequestUseCase(
            request_repository, catalog_repository, sla_repository, GenerateTicketIdUseCase(counter_repository)
        )

    # Catalog items

    def create_item(self, organization_id: str, fields: Dict[str, Any]) -> ServiceCatalogItem:
        item = ServiceCatalogItem(
            id=new_id(),
            service_id=short_token("SVC", 8),
            organization_id=organization_id,
            **{k: v for k, v in fields.items() if k in _ITEM_FIELDS},
        )
        self._apply_nested(item, fields)
        created = self._catalog.create(item)
        logger.info("Catalog item created: %s (%s)", created.name, created.service_id)
        return created

    def list_items(
        self,
        organization_id: str,
        category: Optional[str] = None,
        active_only: bool = False,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[ServiceCatalogItem], int]:
        filters = {"category": category, "availability.is_active": True if active_only else None}
        return self._catalog.find_page(organization_id, filters, page, limit, search)

    def get_item(self, organization_id: str, item_ref: str) -> ServiceCatalogItem:
        item = self._catalog.find_in_organization(organization_id, item_ref)
        if item is None:
            item = self._catalog.find_by_service_id(organization_id, item_ref)
        if item is None:
            raise NotFoundError.for_resource("Service", item_ref)
        return item

    def update_item(self, organization_id: str, item_ref: str, changes: Dict[str, Any]) -> ServiceCatalogItem:
        item = self.get_item(organization_id, item_ref)
        for field in _ITEM_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(item, field, changes[field])
        self._apply_nested(item, changes)
        return self._catalog.update(item)

    def delete_item(self, organization_id: str, item_ref: str) -> None:
        item = self.get_item(organization_id, item_ref)
        self._catalog.delete(item.id)
        logger.info("Catalog item deleted: %s", item.service_id)

    # Service requests

    def create_request(
        self,
        organization_id: str,
        requester: User,
        service_id: str,
        form_data: Optional[Dict[str, Any]] = None,
        priority: str = Priority.MEDIUM,
        site_id: Optional[str] = None,
    ) -> ServiceRequest:
        return self._create_request_use_case.execute(
            organization_id, requester, service_id, form_data, priority, site_id
        )

    def list_requests(
        self,
        organization_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        requester_id: Optional[str] = None,
        service_id: Optional[str] = None,
        assigned_to: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ServiceRequest], int]:
        filters = {
            "status": status,
            "priority": priority,
            "requester.id": requester_id,
            "service_id": service_id,
            "assigned_to.technician_id": assigned_to,
        }
        return self._requests.find_page(organization_id, filters, page, limit, search)

    def get_request(self, organization_id: str, request_ref: str) -> ServiceRequest:
        request = self._requests.find_in_organization(organization_id, request_ref)
        if request is None:
            request = self._requests.find_by_ticket_id(organization_id, request_ref)
        if request is None:
            raise NotFoundError.for_resource("Service request", request_ref)
        return request

    def decide(
        self,
        organization_id: str,
        approver: User,
        request_ref: str,
        approved: bool,
        comments: Optional[str] = None,
    ) -> ServiceRequest:
        """
        Record the decision on the current approval step.

        Raises:
            AuthorizationError: If the user may not decide this step
            ValidationError: If the request is not pending approval
        """
        request = self.get_request(organization_id, request_ref)
        self._ensure_can_approve(organization_id, request, approver)
        request.decide(approver.id, approver.name, approved, comments)
        updated = self._requests.update(request)

        if updated.status != ServiceRequestStatus.PENDING_APPROVAL:
            self._notify.execute(
                user_id=updated.requester.id,
                type=NotificationType.SERVICE_REQUEST_UPDATE,
                title=f"Request {updated.status}",
                message=f"{updated.request_id}: {updated.service_name} was {updated.status}",
                organization_id=organization_id,
                entity_type="service_request",
                entity_id=updated.id,
            )
        return updated

    def assign(
        self,
        organization_id: str,
        actor: User,
        request_ref: str,
        technician_id: str,
        group_id: Optional[str] = None,
        group_name: Optional[str] = None,
    ) -> ServiceRequest:
        request = self.get_request(organization_id, request_ref)
        technician = self._users.find_by_id(technician_id)
        if technician is None or technician.organization_id != organization_id:
            raise NotFoundError.for_resource("User", technician_id)
        request.assign(
            Assignee(
                technician_id=technician.id,
                name=technician.name,
                email=technician.email,
                group_id=group_id,
                group_name=group_name,
            ),
            actor.id,
            actor.name,
        )
        return self._requests.update(request)

    def fulfill(self, organization_id: str, actor: User, request_ref: str, notes: Optional[str] = None) -> ServiceRequest:
        request = self.get_request(organization_id, request_ref)
        request.fulfill(actor.id, actor.name, notes)
        updated = self._requests.update(request)
        self._notify.execute(
            user_id=updated.requester.id,
            type=NotificationType.SERVICE_REQUEST_UPDATE,
            title="Request fulfilled",
            message=f"{updated.request_id}: {updated.service_name} has been fulfilled",
            organization_id=organization_id,
            entity_type="service_request",
            entity_id=updated.id,
        )
        logger.info("Service request fulfilled: %s", updated.request_id)
        return updated

    def cancel(self, organization_id: str, actor: User, request_ref: str) -> ServiceRequest:
        request = self.get_request(organization_id, request_ref)
        if request.requester.id != actor.id and not actor.is_manager():
            raise AuthorizationError("Only the requester or a manager can cancel this request")
        request.cancel(actor.id, actor.name)
        return self._requests.update(request)

    def stats(self, organization_id: str) -> Dict[str, Any]:
        by_status = self._requests.count_by(organization_id, "status")
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_service": self._requests.count_by(organization_id, "service_name"),
            "open": sum(count for status, count in by_status.items() if status not in ServiceRequestStatus.CLOSED),
        }

    @staticmethod
    def _apply_nested(item: ServiceCatalogItem, fields: Dict[str, Any]) -> None:
        if fields.get("approval_chain") is not None or "sla_id" in fields:
            item.workflow = CatalogWorkflow(
                approval_chain=fields.get("approval_chain", item.workflow.approval_chain),
                sla_id=fields.get("sla_id", item.workflow.sla_id),
            )
        if fields.get("fulfillment_type") is not None or fields.get("estimated_hours") is not None:
            item.fulfillment = Fulfillment(
                type=fields.get("fulfillment_type") or item.fulfillment.type,
                estimated_hours=fields.get("estimated_hours") or item.fulfillment.estimated_hours,
            )
        if fields.get("is_active") is not None or fields.get("requires_approval") is not None:
            item.availability = Availability(
                is_active=item.availability.is_active if fields.get("is_active") is None else fields["is_active"],
                requires_approval=(
                    item.availability.requires_approval
                    if fields.get("requires_approval") is None
                    else fields["requires_approval"]
                ),
            )

    def _ensure_can_approve(self, organization_id: str, request: ServiceRequest, approver: User) -> None:
        if approver.is_admin():
            return
        item = self._catalog.find_by_service_id(organization_id, request.service_id)
        step_number = request.approval_status.current_step
        step = None
        if item is not None:
            step = next((s for s in item.workflow.approval_chain if s.step == step_number), None)
        if step is not None and step.approver_id:
            if step.approver_id != approver.id:
                raise AuthorizationError("You are not the approver for this step")
            return
        if not approver.is_manager():
            raise AuthorizationError("Only managers can approve this request")
