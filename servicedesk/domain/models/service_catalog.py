"""
Service Catalog Models
======================

Catalog items describe what users can request; a service request is one
user's order of a catalog item, moved through an approval chain and then
fulfilled.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import (
    ApprovalStatus,
    Priority,
    ServiceCategory,
    ServiceRequestStatus,
)
from servicedesk.domain.models.itsm_common import Assignee, PersonRef, SLATracking, TimelineEvent
from servicedesk.utils.datetime_utils import now


class ApprovalStep(BaseModel):
    step: int
    approver_type: str = "manager"  # "manager" | "user" | "role"
    approver_id: Optional[str] = None
    approver_name: Optional[str] = None
    is_optional: bool = False


class CatalogWorkflow(BaseModel):
    approval_chain: List[ApprovalStep] = Field(default_factory=list)
    sla_id: Optional[str] = None


class Fulfillment(BaseModel):
    type: str = "manual"  # "manual" | "automated" | "hybrid"
    estimated_hours: float = 24


class Availability(BaseModel):
    is_active: bool = True
    requires_approval: bool = False


class ServiceCatalogItem(BaseModel):
    """Service catalog item domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    service_id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    category: str = ServiceCategory.GENERAL_REQUEST
    icon: Optional[str] = None
    form_fields: List[Dict[str, Any]] = Field(default_factory=list)
    workflow: CatalogWorkflow = Field(default_factory=CatalogWorkflow)
    fulfillment: Fulfillment = Field(default_factory=Fulfillment)
    availability: Availability = Field(default_factory=Availability)
    total_requests: int = 0
    tags: List[str] = Field(default_factory=list)
    order: int = 0
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def is_active(self) -> bool:
        return self.availability.is_active

    def approval_steps(self) -> int:
        """Number of approval steps a request must pass (at least one when approval is required)."""
        if not self.availability.requires_approval:
            return 0
        return max(len(self.workflow.approval_chain), 1)


class ApprovalDecision(BaseModel):
    step: int
    approver_id: str
    approver_name: Optional[str] = None
    status: str
    decision_at: datetime = Field(default_factory=now)
    comments: Optional[str] = None


class RequestApproval(BaseModel):
    current_step: int = 1
    total_steps: int = 0
    approvals: List[ApprovalDecision] = Field(default_factory=list)


class RequestFulfillment(BaseModel):
    fulfilled_by: Optional[str] = None
    fulfilled_by_name: Optional[str] = None
    fulfilled_at: Optional[datetime] = None
    notes: Optional[str] = None


class ServiceRequest(BaseModel):
    """Service request domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    request_id: str
    organization_id: str
    service_id: str
    service_name: str
    status: str = ServiceRequestStatus.SUBMITTED
    priority: str = Priority.MEDIUM
    requester: PersonRef
    form_data: Dict[str, Any] = Field(default_factory=dict)
    approval_status: RequestApproval = Field(default_factory=RequestApproval)
    assigned_to: Optional[Assignee] = None
    sla: SLATracking
    fulfillment: RequestFulfillment = Field(default_factory=RequestFulfillment)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    site_id: Optional[str] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    closed_at: Optional[datetime] = None

    def is_closed(self) -> bool:
        return self.status in ServiceRequestStatus.CLOSED

    def add_event(self, event: str, by: str, by_name: Optional[str] = None) -> None:
        self.timeline.append(TimelineEvent(event=event, by=by, by_name=by_name))
        self.updated_at = now()

    def decide(self, approver_id: str, approver_name: Optional[str], approved: bool, comments: Optional[str] = None) -> None:
        """Record the decision for the current approval step."""
        if self.status != ServiceRequestStatus.PENDING_APPROVAL:
            raise ValidationError("Request is not pending approval")

        step = self.approval_status.current_step
        self.approval_status.approvals.append(
            ApprovalDecision(
                step=step,
                approver_id=approver_id,
                approver_name=approver_name,
                status=ApprovalStatus.APPROVED if approved else ApprovalStatus.REJECTED,
                comments=comments,
            )
        )

        if not approved:
            self.status = ServiceRequestStatus.REJECTED
            self.closed_at = now()
            self.add_event("Request Rejected", approver_id, approver_name)
            return

        if step >= self.approval_status.total_steps:
            self.status = ServiceRequestStatus.APPROVED
        else:
            self.approval_status.current_step = step + 1
        self.add_event("Request Approved", approver_id, approver_name)

    def assign(self, assignee: Assignee, by: str, by_name: Optional[str] = None) -> None:
        if self.is_closed():
            raise ValidationError("Cannot assign a closed request")
        if self.status == ServiceRequestStatus.PENDING_APPROVAL:
            raise ValidationError("Request is still pending approval")
        self.assigned_to = assignee
        if self.status in (ServiceRequestStatus.APPROVED, ServiceRequestStatus.SUBMITTED):
            self.status = ServiceRequestStatus.IN_PROGRESS
        self.add_event(f"Assigned to {assignee.name}", by, by_name)

    def fulfill(self, by: str, by_name: Optional[str] = None, notes: Optional[str] = None) -> None:
        if self.is_closed():
            raise ValidationError("Request is already closed")
        if self.status == ServiceRequestStatus.PENDING_APPROVAL:
            raise ValidationError("Request is still pending approval")
        self.status = ServiceRequestStatus.FULFILLED
        self.fulfillment = RequestFulfillment(
            fulfilled_by=by,
            fulfilled_by_name=by_name,
            fulfilled_at=now(),
            notes=notes,
        )
        self.closed_at = now()
        self.add_event("Request Fulfilled", by, by_name)

    def cancel(self, by: str, by_name: Optional[str] = None) -> None:
        if self.is_closed():
            raise ValidationError("Request is already closed")
        self.status = ServiceRequestStatus.CANCELLED
        self.closed_at = now()
        self.add_event("Request Cancelled", by, by_name)
