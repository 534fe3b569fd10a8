"""
Project DTO
===========

Requests for projects, their members, workflows and boards.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.pm_constants import Methodology, ProjectRole, StatusCategory
from servicedesk.domain.models.workflow import WorkflowStatus, WorkflowTransition, infer_color


class ProjectCreateRequest(BaseModel):
    """DTO for creating a project."""
    key: str = Field(..., min_length=2, max_length=10)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    methodology: str = Field(Methodology.SCRUM, pattern=one_of(Methodology.ALL))
    team_ids: List[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "key": "OPS",
            "name": "Operations Platform",
            "methodology": "scrum",
        }
    })


class ProjectUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    team_ids: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ProjectMemberRequest(BaseModel):
    user_id: str
    role: str = Field(ProjectRole.CONTRIBUTOR, pattern=one_of(ProjectRole.ALL))


class ProjectMemberRoleRequest(BaseModel):
    role: str = Field(..., pattern=one_of(ProjectRole.ALL))


class WorkflowStatusInput(BaseModel):
    id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(StatusCategory.TODO, pattern=one_of(StatusCategory.ALL))
    color: Optional[str] = None
    order: Optional[int] = None
    is_initial: bool = False
    is_final: bool = False


class WorkflowTransitionInput(BaseModel):
    id: Optional[str] = None
    name: str
    from_status: str
    to_status: str


class WorkflowUpdateRequest(BaseModel):
    """DTO for replacing a project's workflow statuses (and optionally transitions)."""
    statuses: List[WorkflowStatusInput] = Field(..., min_length=1)
    transitions: Optional[List[WorkflowTransitionInput]] = None


class TransitionTaskRequest(BaseModel):
    status_id: str
    comment: Optional[str] = Field(None, max_length=2000)


class ColumnCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    status_id: Optional[str] = None
    wip_limit: int = Field(0, ge=0)


class ColumnUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    wip_limit: Optional[int] = Field(None, ge=0)


class ColumnReorderRequest(BaseModel):
    column_ids: List[str] = Field(..., min_length=1)


class MoveTaskRequest(BaseModel):
    """DTO for dragging a task onto a board column."""
    task_id: str
    column_id: str
    order: Optional[int] = Field(None, ge=0)
    sprint_id: Optional[str] = None


def to_workflow_statuses(inputs: List[WorkflowStatusInput]) -> List[WorkflowStatus]:
    """Missing colors come from the category; missing orders from list position."""
    return [
        WorkflowStatus(
            id=item.id,
            name=item.name,
            category=item.category,
            color=item.color or infer_color(item.category),
            order=item.order if item.order is not None else index,
            is_initial=item.is_initial,
            is_final=item.is_final,
        )
        for index, item in enumerate(inputs)
    ]


def to_workflow_transitions(inputs: Optional[List[WorkflowTransitionInput]]) -> Optional[List[WorkflowTransition]]:
    if inputs is None:
        return None
    return [
        WorkflowTransition(
            id=item.id or f"t{index}",
            name=item.name,
            from_status=item.from_status,
            to_status=item.to_status,
        )
        for index, item in enumerate(inputs, start=1)
    ]
