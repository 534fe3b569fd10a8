"""
Leave Request DTO
=================
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from servicedesk.domain.models.leave_request import LeaveRequest

_LEAVE_TYPES = "^(vacation|wfh|sick|holiday|blackout)$"


class LeaveRequestCreateRequest(BaseModel):
    """DTO for creating a leave request."""
    team_id: str
    type: str = Field(..., pattern=_LEAVE_TYPES)
    start_date: datetime
    end_date: datetime
    reason: Optional[str] = Field(None, max_length=1000)


class LeaveRequestUpdateRequest(BaseModel):
    type: Optional[str] = Field(None, pattern=_LEAVE_TYPES)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    reason: Optional[str] = Field(None, max_length=1000)


class LeaveReviewRequest(BaseModel):
    note: Optional[str] = Field(None, max_length=1000)


class LeaveRequestResponse(BaseModel):
    id: str
    organization_id: str
    user_id: str
    team_id: str
    type: str
    start_date: datetime
    end_date: datetime
    days: int
    reason: Optional[str] = None
    status: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, leave: LeaveRequest) -> "LeaveRequestResponse":
        return cls(
            id=leave.id,
            organization_id=leave.organization_id,
            user_id=leave.user_id,
            team_id=leave.team_id,
            type=leave.type,
            start_date=leave.start_date,
            end_date=leave.end_date,
            days=leave.days(),
            reason=leave.reason,
            status=leave.status,
            reviewed_by=leave.reviewed_by,
            reviewed_at=leave.reviewed_at,
            review_note=leave.review_note,
            created_at=leave.created_at,
            updated_at=leave.updated_at,
        )
