"""
Incident Model
==============

Domain model for an unplanned interruption or degradation of a service.
Status rules (which transitions are allowed, reopen counting, closing)
live here; SLA clock handling is done by the SLA calculator.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import Channel, IncidentStatus
from servicedesk.domain.models.itsm_common import (
    Assignee,
    PersonRef,
    Resolution,
    SLATracking,
    TimelineEvent,
    Worklog,
)
from servicedesk.utils.datetime_utils import now

VALID_TRANSITIONS: Dict[str, tuple] = {
    IncidentStatus.OPEN: (
        IncidentStatus.IN_PROGRESS,
        IncidentStatus.PENDING,
        IncidentStatus.RESOLVED,
        IncidentStatus.CANCELLED,
    ),
    IncidentStatus.IN_PROGRESS: (
        IncidentStatus.PENDING,
        IncidentStatus.RESOLVED,
        IncidentStatus.CANCELLED,
    ),
    IncidentStatus.PENDING: (
        IncidentStatus.IN_PROGRESS,
        IncidentStatus.RESOLVED,
        IncidentStatus.CANCELLED,
    ),
    IncidentStatus.RESOLVED: (
        IncidentStatus.OPEN,
        IncidentStatus.CLOSED,
    ),
    IncidentStatus.CLOSED: (),
    IncidentStatus.CANCELLED: (),
}


class Incident(BaseModel):
    """Incident domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    incident_id: str
    organization_id: str
    title: str
    description: str
    status: str = IncidentStatus.OPEN
    priority: str
    impact: str
    urgency: str
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    requester: PersonRef
    channel: str = Channel.SELF_SERVICE
    assigned_to: Optional[Assignee] = None
    sla: SLATracking
    worklogs: List[Worklog] = Field(default_factory=list)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    linked_problem_id: Optional[str] = None
    linked_change_id: Optional[str] = None
    resolution: Optional[Resolution] = None
    site_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_major: bool = False
    reopen_count: int = 0
    first_response_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    closed_at: Optional[datetime] = None

    def is_closed(self) -> bool:
        return self.status == IncidentStatus.CLOSED

    def is_terminal(self) -> bool:
        return self.status in IncidentStatus.TERMINAL

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, ())

    def add_event(self, event: str, by: str, by_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        self.timeline.append(TimelineEvent(event=event, by=by, by_name=by_name, details=details or {}))
        self.updated_at = now()

    def change_status(self, new_status: str, by: str, by_name: Optional[str] = None) -> str:
        """
        Apply a status transition. Returns the previous status.

        Raises:
            ValidationError: If the transition is not allowed
        """
        if not self.can_transition_to(new_status):
            raise ValidationError(f"Invalid status transition from {self.status} to {new_status}")

        previous = self.status
        if previous == IncidentStatus.RESOLVED and new_status == IncidentStatus.OPEN:
            self.reopen_count += 1
            self.resolution = None
        if new_status == IncidentStatus.CLOSED:
            self.closed_at = now()

        self.status = new_status
        self.add_event(f"Status changed from {previous} to {new_status}", by, by_name)
        return previous

    def assign(self, assignee: Assignee, by: str, by_name: Optional[str] = None) -> bool:
        """Assign the incident. Returns True on the first assignment."""
        if self.is_closed():
            raise ValidationError("Cannot assign a closed incident")
        first_assignment = self.first_response_at is None
        self.assigned_to = assignee
        if first_assignment:
            self.first_response_at = now()
        self.add_event(f"Assigned to {assignee.name}", by, by_name, {"technician_id": assignee.technician_id})
        return first_assignment

    def add_worklog(self, worklog: Worklog) -> None:
        if self.is_closed():
            raise ValidationError("Cannot add worklog to a closed incident")
        self.worklogs.append(worklog)
        self.updated_at = now()
