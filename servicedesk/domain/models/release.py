"""
Release Model
=============

A release bundles approved changes into one deployment.
"""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import ApprovalStatus, Priority, ReleaseStatus, ReleaseType
from servicedesk.domain.models.itsm_common import PersonRef, TimelineEvent
from servicedesk.utils.datetime_utils import now

RELEASE_TRANSITIONS: Dict[str, tuple] = {
    ReleaseStatus.PLANNING: (ReleaseStatus.BUILDING,),
    ReleaseStatus.BUILDING: (ReleaseStatus.TESTING,),
    ReleaseStatus.TESTING: (ReleaseStatus.APPROVED,),
    ReleaseStatus.APPROVED: (ReleaseStatus.DEPLOYED,),
    ReleaseStatus.DEPLOYED: (ReleaseStatus.CLOSED, ReleaseStatus.ROLLED_BACK),
    ReleaseStatus.ROLLED_BACK: (ReleaseStatus.BUILDING,),
    ReleaseStatus.CLOSED: (),
}


class Deployment(BaseModel):
    planned_date: Optional[datetime] = None
    actual_date: Optional[datetime] = None
    environment: str = "production"
    deployment_window: Optional[str] = None
    rollback_validated: bool = False


class Testing(BaseModel):
    test_plan: Optional[str] = None
    test_results: Optional[str] = None
    tested_by: Optional[str] = None
    tested_at: Optional[datetime] = None
    passed: Optional[bool] = None


class ReleaseApproval(BaseModel):
    status: str = ApprovalStatus.PENDING
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None


class Release(BaseModel):
    """Release domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    release_id: str
    organization_id: str
    name: str
    version: str
    description: Optional[str] = None
    status: str = ReleaseStatus.PLANNING
    priority: str = Priority.MEDIUM
    type: str = ReleaseType.MINOR
    owner: Optional[PersonRef] = None
    linked_changes: List[str] = Field(default_factory=list)
    deployment: Deployment = Field(default_factory=Deployment)
    testing: Testing = Field(default_factory=Testing)
    approval: ReleaseApproval = Field(default_factory=ReleaseApproval)
    affected_services: List[str] = Field(default_factory=list)
    release_notes: Optional[str] = None
    timeline: List[TimelineEvent] = Field(default_factory=list)
    site_id: Optional[str] = None
    created_by: str
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def can_transition_to(self, status: str) -> bool:
        return status in RELEASE_TRANSITIONS.get(self.status, ())

    def add_event(self, event: str, by: str, by_name: Optional[str] = None) -> None:
        self.timeline.append(TimelineEvent(event=event, by=by, by_name=by_name))
        self.updated_at = now()

    def change_status(self, status: str, by: str, by_name: Optional[str] = None) -> None:
        if not self.can_transition_to(status):
            raise ValidationError(f"Invalid status transition from {self.status} to {status}")
        previous = self.status
        self.status = status
        if status == ReleaseStatus.APPROVED:
            self.approval.status = ApprovalStatus.APPROVED
            self.approval.approved_by = by
            self.approval.approved_at = now()
        elif status == ReleaseStatus.DEPLOYED:
            self.deployment.actual_date = now()
        self.add_event(f"Status changed from {previous} to {status}", by, by_name)

    def link_change(self, change_id: str) -> bool:
        if change_id in self.linked_changes:
            return False
        self.linked_changes.append(change_id)
        self.updated_at = now()
        return True

    def record_test_results(self, passed: bool, results: Optional[str], tested_by: str) -> None:
        self.testing.passed = passed
        self.testing.test_results = results
        self.testing.tested_by = tested_by
        self.testing.tested_at = now()
        self.updated_at = now()
