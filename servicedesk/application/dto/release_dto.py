"""
Release DTO
===========
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.itsm_constants import Priority, ReleaseStatus, ReleaseType


class ReleaseCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    version: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    type: str = Field(ReleaseType.MINOR, pattern=one_of(ReleaseType.ALL))
    priority: str = Field(Priority.MEDIUM, pattern=one_of(Priority.ALL))
    planned_date: Optional[datetime] = None
    environment: str = "production"
    deployment_window: Optional[str] = None
    test_plan: Optional[str] = None
    affected_services: List[str] = Field(default_factory=list)
    release_notes: Optional[str] = None
    linked_changes: List[str] = Field(default_factory=list)
    site_id: Optional[str] = None


class ReleaseUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    version: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    type: Optional[str] = Field(None, pattern=one_of(ReleaseType.ALL))
    priority: Optional[str] = Field(None, pattern=one_of(Priority.ALL))
    planned_date: Optional[datetime] = None
    environment: Optional[str] = None
    deployment_window: Optional[str] = None
    test_plan: Optional[str] = None
    affected_services: Optional[List[str]] = None
    release_notes: Optional[str] = None


class ReleaseStatusRequest(BaseModel):
    status: str = Field(..., pattern=one_of(ReleaseStatus.ALL))


class LinkChangeRequest(BaseModel):
    change_id: str


class TestResultsRequest(BaseModel):
    passed: bool
    test_results: Optional[str] = None
