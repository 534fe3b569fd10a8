"""
Change DTO
==========
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.itsm_constants import ChangeType, Impact, Priority, RiskLevel, Urgency


class ScheduleInput(BaseModel):
    planned_start: Optional[datetime] = None
    planned_end: Optional[datetime] = None
    maintenance_window: Optional[str] = None
    downtime_minutes: int = Field(0, ge=0)


class CabMemberInput(BaseModel):
    member_id: str
    name: Optional[str] = None
    role: str = "member"


class ChangeCreateRequest(BaseModel):
    """DTO for raising a change request (starts as draft)."""
    type: str = Field(ChangeType.NORMAL, pattern=one_of(ChangeType.ALL))
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    impact: str = Field(Impact.MEDIUM, pattern=one_of(Impact.ALL))
    urgency: str = Field(Urgency.MEDIUM, pattern=one_of(Urgency.ALL))
    priority: Optional[str] = Field(None, pattern=one_of(Priority.ALL))
    risk: str = Field(RiskLevel.MEDIUM, pattern=one_of(RiskLevel.ALL))
    risk_assessment: Optional[str] = None
    implementation_plan: Optional[str] = None
    rollback_plan: Optional[str] = None
    test_plan: Optional[str] = None
    communication_plan: Optional[str] = None
    reason_for_change: Optional[str] = None
    business_justification: Optional[str] = None
    affected_services: List[str] = Field(default_factory=list)
    schedule: Optional[ScheduleInput] = None
    cab_members: List[CabMemberInput] = Field(default_factory=list)
    linked_problems: List[str] = Field(default_factory=list)
    linked_incidents: List[str] = Field(default_factory=list)
    site_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class ChangeUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    type: Optional[str] = Field(None, pattern=one_of(ChangeType.ALL))
    priority: Optional[str] = Field(None, pattern=one_of(Priority.ALL))
    impact: Optional[str] = Field(None, pattern=one_of(Impact.ALL))
    risk: Optional[str] = Field(None, pattern=one_of(RiskLevel.ALL))
    risk_assessment: Optional[str] = None
    implementation_plan: Optional[str] = None
    rollback_plan: Optional[str] = None
    test_plan: Optional[str] = None
    communication_plan: Optional[str] = None
    reason_for_change: Optional[str] = None
    business_justification: Optional[str] = None
    affected_services: Optional[List[str]] = None
    schedule: Optional[ScheduleInput] = None
    cab_members: Optional[List[CabMemberInput]] = None
    tags: Optional[List[str]] = None


class CabDecisionRequest(BaseModel):
    decision: str = Field(..., pattern="^(approved|rejected)$")
    comments: Optional[str] = Field(None, max_length=2000)


class ChangeScheduleRequest(BaseModel):
    planned_start: datetime
    planned_end: datetime
    maintenance_window: Optional[str] = None


class ChangeCompleteRequest(BaseModel):
    success: bool = True
    notes: Optional[str] = None
