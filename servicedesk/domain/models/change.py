"""
Change Model
============

Domain model for a change request and its Change Advisory Board (CAB)
approval. Lifecycle:

    draft -> submitted/cab_review -> approved | rejected
    approved -> scheduled -> implementing -> completed | failed
    any non-final status -> cancelled
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import (
    ApprovalStatus,
    ChangeStatus,
    ChangeType,
    RiskLevel,
)
from servicedesk.domain.models.itsm_common import PersonRef, TimelineEvent
from servicedesk.utils.datetime_utils import now


def is_cab_required(change_type: str, risk: str) -> bool:
    """Standard and emergency changes skip the CAB; normal ones need it unless low risk."""
    if change_type in (ChangeType.STANDARD, ChangeType.EMERGENCY):
        return False
    return risk != RiskLevel.LOW


class CabMember(BaseModel):
    member_id: str
    name: str
    role: str = "member"
    decision: str = ApprovalStatus.PENDING
    decision_at: Optional[datetime] = None
    comments: Optional[str] = None
    # False for a voter who was not on the change's board
    listed: bool = True


class CabApproval(BaseModel):
    cab_status: str = ApprovalStatus.PENDING
    required_approvers: int = 0
    current_approvers: int = 0
    members: List[CabMember] = Field(default_factory=list)
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None


class ChangeSchedule(BaseModel):
    planned_start: Optional[datetime] = None
    planned_end: Optional[datetime] = None
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    maintenance_window: Optional[str] = None
    downtime_minutes: int = 0

    def is_complete(self) -> bool:
        return self.planned_start is not None and self.planned_end is not None


class Change(BaseModel):
    """Change domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    change_id: str
    organization_id: str
    type: str = ChangeType.NORMAL
    title: str
    description: str
    status: str = ChangeStatus.DRAFT
    priority: str
    impact: str
    risk: str = RiskLevel.MEDIUM
    risk_assessment: Optional[str] = None
    requested_by: PersonRef
    owner: Optional[PersonRef] = None
    implementation_plan: Optional[str] = None
    rollback_plan: Optional[str] = None
    test_plan: Optional[str] = None
    communication_plan: Optional[str] = None
    reason_for_change: Optional[str] = None
    business_justification: Optional[str] = None
    cab_required: bool = True
    approval: CabApproval = Field(default_factory=CabApproval)
    schedule: ChangeSchedule = Field(default_factory=ChangeSchedule)
    review_notes: Optional[str] = None
    linked_problems: List[str] = Field(default_factory=list)
    linked_incidents: List[str] = Field(default_factory=list)
    release_id: Optional[str] = None
    affected_services: List[str] = Field(default_factory=list)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    site_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    closed_at: Optional[datetime] = None

    def is_editable(self) -> bool:
        return self.status in ChangeStatus.EDITABLE

    def add_event(self, event: str, by: str, by_name: Optional[str] = None) -> None:
        self.timeline.append(TimelineEvent(event=event, by=by, by_name=by_name))
        self.updated_at = now()

    def submission_errors(self) -> List[str]:
        """Everything still missing before the change can go to approval."""
        errors = []
        if not self.implementation_plan:
            errors.append("Implementation plan is required")
        if not self.rollback_plan:
            errors.append("Rollback plan is required")
        if not self.risk_assessment:
            errors.append("Risk assessment is required")
        if not self.affected_services:
            errors.append("At least one affected service is required")
        if not self.schedule.is_complete():
            errors.append("Schedule is required")
        elif self.schedule.planned_start >= self.schedule.planned_end:
            errors.append("Planned start must be before planned end")
        return errors

    def submit(self, by: str, by_name: Optional[str] = None) -> None:
        if self.status != ChangeStatus.DRAFT:
            raise ValidationError("Only draft changes can be submitted")
        errors = self.submission_errors()
        if errors:
            raise ValidationError(f"Validation failed: {', '.join(errors)}")

        if self.cab_required:
            self.status = ChangeStatus.CAB_REVIEW
            self.add_event("Submitted for CAB Review", by, by_name)
        else:
            self.status = ChangeStatus.APPROVED
            self.approval.cab_status = ApprovalStatus.APPROVED
            self.approval.approved_at = now()
            self.add_event("Auto-approved (no CAB required)", by, by_name)

    def record_cab_decision(
        self,
        member_id: str,
        name: str,
        decision: str,
        comments: Optional[str] = None,
        role: str = "member",
    ) -> str:
        """
        Record one CAB member's vote and recompute the CAB outcome.

        A repeated vote by the same member replaces the earlier one. Any
        rejection rejects the change. With a board listed, the change is
        approved once every listed member has approved; votes from voters
        outside the list are recorded but never stand in for a listed
        member. Without a board the first approval decides.

        Returns:
            The resulting cab_status
        """
        if self.status not in (ChangeStatus.CAB_REVIEW, ChangeStatus.SUBMITTED):
            raise ValidationError("Change is not awaiting CAB approval")
        if decision not in (ApprovalStatus.APPROVED, ApprovalStatus.REJECTED):
            raise ValidationError("Decision must be 'approved' or 'rejected'")

        member = next((m for m in self.approval.members if m.member_id == member_id), None)
        if member is None:
            member = CabMember(member_id=member_id, name=name, role=role, listed=False)
            self.approval.members.append(member)
        member.decision = decision
        member.decision_at = now()
        member.comments = comments

        board = [m for m in self.approval.members if m.listed] or [member]
        approved = sum(1 for m in board if m.decision == ApprovalStatus.APPROVED)
        rejected = any(m.decision == ApprovalStatus.REJECTED for m in self.approval.members)
        self.approval.current_approvers = approved

        if rejected:
            self.approval.cab_status = ApprovalStatus.REJECTED
            self.approval.rejected_at = now()
            self.approval.rejection_reason = comments
            self.status = ChangeStatus.REJECTED
            self.add_event(f"CAB rejected by {name}", member_id, name)
        elif approved == len(board):
            self.approval.cab_status = ApprovalStatus.APPROVED
            self.approval.approved_at = now()
            self.status = ChangeStatus.APPROVED
            self.add_event(f"CAB approved by {name}", member_id, name)
        else:
            self.add_event(f"CAB vote recorded: {name} approved", member_id, name)
        return self.approval.cab_status

    def reopen_as_draft(self) -> None:
        """Editing a rejected change puts it back into draft."""
        if self.status == ChangeStatus.REJECTED:
            self.status = ChangeStatus.DRAFT
            self.approval = CabApproval(
                required_approvers=self.approval.required_approvers,
                members=[
                    CabMember(member_id=m.member_id, name=m.name, role=m.role)
                    for m in self.approval.members
                    if m.listed
                ],
            )

    def schedule_for(
        self,
        planned_start: datetime,
        planned_end: datetime,
        by: str,
        by_name: Optional[str] = None,
        maintenance_window: Optional[str] = None,
    ) -> None:
        if self.status != ChangeStatus.APPROVED:
            raise ValidationError("Only approved changes can be scheduled")
        if planned_start >= planned_end:
            raise ValidationError("Planned start must be before planned end")
        self.schedule.planned_start = planned_start
        self.schedule.planned_end = planned_end
        if maintenance_window is not None:
            self.schedule.maintenance_window = maintenance_window
        self.status = ChangeStatus.SCHEDULED
        self.add_event("Change Scheduled", by, by_name)

    def start_implementation(self, by: str, by_name: Optional[str] = None) -> None:
        if self.status != ChangeStatus.SCHEDULED:
            raise ValidationError("Only scheduled changes can be implemented")
        self.status = ChangeStatus.IMPLEMENTING
        self.schedule.actual_start = now()
        self.add_event("Implementation Started", by, by_name)

    def complete(self, success: bool, notes: Optional[str], by: str, by_name: Optional[str] = None) -> None:
        if self.status != ChangeStatus.IMPLEMENTING:
            raise ValidationError("Only implementing changes can be completed")
        self.status = ChangeStatus.COMPLETED if success else ChangeStatus.FAILED
        self.schedule.actual_end = now()
        self.review_notes = notes
        self.closed_at = now()
        self.add_event("Change Completed" if success else "Change Failed", by, by_name)

    def cancel(self, by: str, by_name: Optional[str] = None, reason: Optional[str] = None) -> None:
        if self.status in (ChangeStatus.COMPLETED, ChangeStatus.CANCELLED):
            raise ValidationError("Cannot cancel completed or already cancelled changes")
        self.status = ChangeStatus.CANCELLED
        self.closed_at = now()
        self.add_event(f"Change Cancelled{': ' + reason if reason else ''}", by, by_name)
