"""
Incident DTO
============

Requests for creating and working incidents.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.itsm_constants import Channel, Impact, IncidentStatus, Urgency


class PersonInput(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    department: Optional[str] = None


class IncidentCreateRequest(BaseModel):
    """
    DTO for creating an incident.

    Priority is derived from impact and urgency. The requester defaults to
    the signed-in user.
    """
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    impact: str = Field(Impact.MEDIUM, pattern=one_of(Impact.ALL))
    urgency: str = Field(Urgency.MEDIUM, pattern=one_of(Urgency.ALL))
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    channel: str = Field(Channel.SELF_SERVICE, pattern=one_of(Channel.ALL))
    requester: Optional[PersonInput] = None
    site_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_major: bool = False

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "VPN disconnects every few minutes",
            "description": "Remote staff in the east region lose VPN connectivity.",
            "impact": "high",
            "urgency": "medium",
            "channel": "email",
        }
    })


class IncidentUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    impact: Optional[str] = Field(None, pattern=one_of(Impact.ALL))
    urgency: Optional[str] = Field(None, pattern=one_of(Urgency.ALL))
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    site_id: Optional[str] = None
    tags: Optional[List[str]] = None
    is_major: Optional[bool] = None


class IncidentStatusRequest(BaseModel):
    status: str = Field(..., pattern=one_of(IncidentStatus.ALL))
    note: Optional[str] = Field(None, max_length=2000)


class AssignRequest(BaseModel):
    """DTO for assigning a ticket to a technician."""
    technician_id: str
    group_id: Optional[str] = None
    group_name: Optional[str] = None


class IncidentResolveRequest(BaseModel):
    resolution_code: str = Field(..., min_length=1, max_length=100)
    resolution_notes: str = Field(..., min_length=1)


class WorklogRequest(BaseModel):
    minutes_spent: int = Field(..., gt=0, le=24 * 60)
    note: str = Field(..., min_length=1, max_length=5000)
    is_internal: bool = False


class LinkProblemRequest(BaseModel):
    problem_id: str


class EscalateRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


class IncidentCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    is_internal: bool = False
