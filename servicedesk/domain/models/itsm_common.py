"""
ITSM Value Objects
==================

Pieces shared by incidents, problems, changes, releases and service
requests: people references, timeline events, worklogs and SLA tracking.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import Impact, Priority, Urgency
from servicedesk.utils.datetime_utils import now

_PRIORITY_MATRIX = {
    Impact.HIGH: {Urgency.HIGH: Priority.CRITICAL, Urgency.MEDIUM: Priority.HIGH, Urgency.LOW: Priority.MEDIUM},
    Impact.MEDIUM: {Urgency.HIGH: Priority.HIGH, Urgency.MEDIUM: Priority.MEDIUM, Urgency.LOW: Priority.LOW},
    Impact.LOW: {Urgency.HIGH: Priority.MEDIUM, Urgency.MEDIUM: Priority.LOW, Urgency.LOW: Priority.LOW},
}


def calculate_priority(impact: str, urgency: str) -> str:
    """Priority from the impact x urgency matrix."""
    try:
        return _PRIORITY_MATRIX[impact][urgency]
    except KeyError:
        raise ValidationError(f"Invalid impact/urgency combination: {impact}/{urgency}")


class PersonRef(BaseModel):
    """Denormalized reference to a user (requester, owner, assignee)."""
    id: str
    name: str
    email: Optional[str] = None
    department: Optional[str] = None

    @classmethod
    def of(cls, user) -> "PersonRef":
        return cls(id=user.id, name=user.name, email=user.email, department=user.department)


class Assignee(BaseModel):
    technician_id: str
    name: str
    email: Optional[str] = None
    group_id: Optional[str] = None
    group_name: Optional[str] = None


class TimelineEvent(BaseModel):
    event: str
    by: str
    by_name: Optional[str] = None
    time: datetime = Field(default_factory=now)
    details: Dict[str, Any] = Field(default_factory=dict)


class Worklog(BaseModel):
    log_id: str
    by: str
    by_name: Optional[str] = None
    minutes_spent: int
    note: str
    is_internal: bool = False
    created_at: datetime = Field(default_factory=now)


class Resolution(BaseModel):
    code: str
    notes: str
    resolved_by: str
    resolved_by_name: Optional[str] = None
    resolved_at: datetime = Field(default_factory=now)


class SLATracking(BaseModel):
    """Due dates and outcome of the SLA applied to one ticket."""
    sla_id: str
    response_due: datetime
    resolution_due: datetime
    response_met: Optional[bool] = None
    resolution_met: Optional[bool] = None
    response_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    breach_flag: bool = False
    escalation_level: int = 0
    paused_at: Optional[datetime] = None
    paused_duration_minutes: int = 0

    def is_paused(self) -> bool:
        return self.paused_at is not None
