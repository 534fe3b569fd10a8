"""
Leave Request Model
===================

Time off, work-from-home days, public holidays and blackout days for a team.
Holidays and blackouts are calendar markers and never need review.
"""
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field

from servicedesk.domain.constants.people_constants import LeaveStatus, LeaveType
from servicedesk.utils.datetime_utils import now


@dataclass
class LeaveRequest:
    id: str
    organization_id: str
    user_id: str
    team_id: str
    type: str
    start_date: datetime
    end_date: datetime
    reason: Optional[str] = None
    status: str = LeaveStatus.PENDING
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    @staticmethod
    def is_auto_approved_type(leave_type: str) -> bool:
        return leave_type in LeaveType.AUTO_APPROVED

    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    def approve(self, reviewer_id: str) -> None:
        self.status = LeaveStatus.APPROVED
        self.reviewed_by = reviewer_id
        self.reviewed_at = now()
        self.updated_at = now()

    def reject(self, reviewer_id: str, note: Optional[str] = None) -> None:
        self.status = LeaveStatus.REJECTED
        self.reviewed_by = reviewer_id
        self.reviewed_at = now()
        self.review_note = note
        self.updated_at = now()

    def days(self) -> int:
        """Inclusive number of calendar days covered."""
        return (self.end_date.date() - self.start_date.date()).days + 1
