"""
SLA DTO
=======

SLA policy requests reuse the policy value objects for their nested parts.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.itsm_constants import Priority
from servicedesk.domain.models.sla import BusinessHours, EscalationLevel, SLAScope, TimeTarget


class SLACreateRequest(BaseModel):
    """DTO for creating an SLA policy."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    priority: str = Field(..., pattern=one_of(Priority.ALL))
    response_time: TimeTarget
    resolution_time: TimeTarget
    business_hours: Optional[BusinessHours] = None
    escalation_matrix: List[EscalationLevel] = Field(default_factory=list)
    applies_to: SLAScope = Field(default_factory=SLAScope)
    is_default: bool = False
    is_active: bool = True


class SLAUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    priority: Optional[str] = Field(None, pattern=one_of(Priority.ALL))
    response_time: Optional[TimeTarget] = None
    resolution_time: Optional[TimeTarget] = None
    business_hours: Optional[BusinessHours] = None
    escalation_matrix: Optional[List[EscalationLevel]] = None
    applies_to: Optional[SLAScope] = None
    is_default: Optional[bool] = None
    is_active: Optional[bool] = None
