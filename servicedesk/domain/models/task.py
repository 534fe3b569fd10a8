"""
Task Model
==========

Work item of a project (epic, story, task, bug, subtask, change request).
The task carries a snapshot of its workflow status so boards and sprint
metrics can be computed without re-reading the workflow.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.pm_constants import StatusCategory, TaskPriority, TaskType
from servicedesk.domain.models.workflow import WorkflowStatus
from servicedesk.utils.datetime_utils import now
from servicedesk.utils.id_utils import new_id


class TaskStatus(BaseModel):
    id: str
    name: str
    category: str = StatusCategory.TODO

    @classmethod
    def from_workflow_status(cls, status: WorkflowStatus) -> "TaskStatus":
        return cls(id=status.id, name=status.name, category=status.category)


class WorkflowHistoryEntry(BaseModel):
    from_status: Optional[str] = None
    to_status: str
    changed_by: str
    changed_at: datetime = Field(default_factory=now)
    comment: Optional[str] = None


class TaskComment(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    content: str
    created_at: datetime = Field(default_factory=now)


class Task(BaseModel):
    """Task domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    organization_id: str
    project_id: str
    key: str
    number: int
    title: str
    description: Optional[str] = None
    type: str = TaskType.TASK
    priority: str = TaskPriority.MEDIUM
    status: TaskStatus
    assignee_id: Optional[str] = None
    reporter_id: str
    sprint_id: Optional[str] = None
    epic_id: Optional[str] = None
    parent_id: Optional[str] = None
    subtasks: List[str] = Field(default_factory=list)
    story_points: Optional[float] = None
    estimated_hours: Optional[float] = None
    due_date: Optional[datetime] = None
    labels: List[str] = Field(default_factory=list)
    watchers: List[str] = Field(default_factory=list)
    comments: List[TaskComment] = Field(default_factory=list)
    workflow_history: List[WorkflowHistoryEntry] = Field(default_factory=list)
    column_order: int = 0
    backlog_order: int = 0
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def is_done(self) -> bool:
        return self.status.category == StatusCategory.DONE

    def points(self) -> float:
        return self.story_points or 0

    def transition_to(self, status: WorkflowStatus, user_id: str, comment: Optional[str] = None) -> None:
        """
        Move the task to a workflow status and record the change.
        Entering a done-category status stamps completed_at; leaving clears it.
        """
        self.workflow_history.append(
            WorkflowHistoryEntry(
                from_status=self.status.id,
                to_status=status.id,
                changed_by=user_id,
                comment=comment,
            )
        )
        self.status = TaskStatus.from_workflow_status(status)
        self.completed_at = now() if status.category == StatusCategory.DONE else None
        self.updated_at = now()

    def assign(self, user_id: Optional[str]) -> bool:
        """Returns True when the assignee actually changed."""
        if self.assignee_id == user_id:
            return False
        self.assignee_id = user_id
        if user_id and user_id not in self.watchers:
            self.watchers.append(user_id)
        self.updated_at = now()
        return True

    def add_comment(self, user_id: str, content: str) -> TaskComment:
        if not content or not content.strip():
            raise ValidationError("Comment cannot be empty")
        comment = TaskComment(user_id=user_id, content=content.strip())
        self.comments.append(comment)
        self.updated_at = now()
        return comment

    def watch(self, user_id: str) -> None:
        if user_id not in self.watchers:
            self.watchers.append(user_id)
            self.updated_at = now()

    def unwatch(self, user_id: str) -> None:
        if user_id in self.watchers:
            self.watchers.remove(user_id)
            self.updated_at = now()
