"""
Problem DTO
===========
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.itsm_constants import Impact, Priority, ProblemStatus, Urgency


class ProblemCreateRequest(BaseModel):
    """DTO for logging a problem. Priority defaults to the impact x urgency matrix."""
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    impact: str = Field(Impact.MEDIUM, pattern=one_of(Impact.ALL))
    urgency: str = Field(Urgency.MEDIUM, pattern=one_of(Urgency.ALL))
    priority: Optional[str] = Field(None, pattern=one_of(Priority.ALL))
    category_id: Optional[str] = None
    owner_id: Optional[str] = None
    linked_incidents: List[str] = Field(default_factory=list)
    affected_services: List[str] = Field(default_factory=list)
    site_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class ProblemUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    priority: Optional[str] = Field(None, pattern=one_of(Priority.ALL))
    impact: Optional[str] = Field(None, pattern=one_of(Impact.ALL))
    category_id: Optional[str] = None
    owner_id: Optional[str] = None
    affected_services: Optional[List[str]] = None
    tags: Optional[List[str]] = None


class RootCauseRequest(BaseModel):
    root_cause: str = Field(..., min_length=1)
    workaround: Optional[str] = None


class KnownErrorRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    symptoms: str = Field(..., min_length=1)
    root_cause: str = Field(..., min_length=1)
    workaround: str = Field(..., min_length=1)


class LinkIncidentRequest(BaseModel):
    incident_id: str


class ProblemStatusRequest(BaseModel):
    status: str = Field(..., pattern=one_of(ProblemStatus.ALL))


class ProblemResolveRequest(BaseModel):
    permanent_fix: str = Field(..., min_length=1)
