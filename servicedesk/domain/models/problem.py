"""
Problem Model
=============

Domain model for the underlying cause of one or more incidents.
A problem with a known root cause and workaround becomes a known error.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import ProblemStatus
from servicedesk.domain.models.itsm_common import PersonRef, TimelineEvent
from servicedesk.utils.datetime_utils import now


class KnownError(BaseModel):
    ke_id: str
    title: str
    symptoms: str
    root_cause: str
    workaround: str
    documented_at: datetime = Field(default_factory=now)
    documented_by: str


class ProblemResolution(BaseModel):
    permanent_fix: str
    resolved_by: str
    resolved_by_name: Optional[str] = None
    resolved_at: datetime = Field(default_factory=now)


class Problem(BaseModel):
    """Problem domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    problem_id: str
    organization_id: str
    title: str
    description: str
    status: str = ProblemStatus.LOGGED
    priority: str
    impact: str
    category_id: Optional[str] = None
    owner: Optional[PersonRef] = None
    linked_incidents: List[str] = Field(default_factory=list)
    root_cause: Optional[str] = None
    workaround: Optional[str] = None
    known_error: Optional[KnownError] = None
    resolution: Optional[ProblemResolution] = None
    affected_services: List[str] = Field(default_factory=list)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    site_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    closed_at: Optional[datetime] = None

    def add_event(self, event: str, by: str, by_name: Optional[str] = None) -> None:
        self.timeline.append(TimelineEvent(event=event, by=by, by_name=by_name))
        self.updated_at = now()

    def link_incident(self, incident_id: str) -> bool:
        """Returns False when the incident was already linked."""
        if incident_id in self.linked_incidents:
            return False
        self.linked_incidents.append(incident_id)
        self.updated_at = now()
        return True

    def set_root_cause(self, root_cause: str, workaround: Optional[str] = None) -> None:
        if not root_cause or not root_cause.strip():
            raise ValidationError("Root cause is required")
        self.root_cause = root_cause.strip()
        if workaround is not None:
            self.workaround = workaround
        if self.status == ProblemStatus.LOGGED:
            self.status = ProblemStatus.RCA_IN_PROGRESS
        self.updated_at = now()

    def mark_known_error(self, known_error: KnownError) -> None:
        self.known_error = known_error
        self.root_cause = known_error.root_cause
        self.workaround = known_error.workaround
        self.status = ProblemStatus.KNOWN_ERROR
        self.updated_at = now()

    def change_status(self, status: str) -> None:
        if status not in ProblemStatus.ALL:
            raise ValidationError(f"Invalid problem status '{status}'")
        self.status = status
        if status == ProblemStatus.CLOSED:
            self.closed_at = now()
        self.updated_at = now()

    def resolve(self, resolution: ProblemResolution) -> None:
        if self.status == ProblemStatus.CLOSED:
            raise ValidationError("Cannot resolve a closed problem")
        self.resolution = resolution
        self.status = ProblemStatus.RESOLVED
        self.updated_at = now()
