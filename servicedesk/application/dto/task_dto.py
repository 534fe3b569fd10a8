"""
Task DTO
========
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.pm_constants import TaskPriority, TaskType


class TaskCreateRequest(BaseModel):
    """DTO for creating a task in a project."""
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    type: str = Field(TaskType.TASK, pattern=one_of(TaskType.ALL))
    priority: str = Field(TaskPriority.MEDIUM, pattern=one_of(TaskPriority.ALL))
    assignee_id: Optional[str] = None
    sprint_id: Optional[str] = None
    epic_id: Optional[str] = None
    parent_id: Optional[str] = None
    story_points: Optional[float] = Field(None, ge=0)
    estimated_hours: Optional[float] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    labels: List[str] = Field(default_factory=list)


class TaskUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    type: Optional[str] = Field(None, pattern=one_of(TaskType.ALL))
    priority: Optional[str] = Field(None, pattern=one_of(TaskPriority.ALL))
    epic_id: Optional[str] = None
    story_points: Optional[float] = Field(None, ge=0)
    estimated_hours: Optional[float] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    labels: Optional[List[str]] = None
    backlog_order: Optional[int] = Field(None, ge=0)


class TaskAssignRequest(BaseModel):
    # None unassigns
    assignee_id: Optional[str] = None
