"""
Sprint Model
============

Domain model for a time-boxed iteration of a project.
Lifecycle: planning -> active -> completed (or cancelled).
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.pm_constants import SprintStatus
from servicedesk.utils.datetime_utils import now


class SprintCapacity(BaseModel):
    planned: float = 0
    committed: float = 0
    available: float = 0


class TeamMemberCapacity(BaseModel):
    user_id: str
    available_days: float = 10
    hours_per_day: float = 8
    planned_leave: float = 0
    meeting_hours: float = 0


class SprintVelocity(BaseModel):
    planned: float = 0
    completed: float = 0
    average: Optional[float] = None


class SprintCommitment(BaseModel):
    committed_at: datetime = Field(default_factory=now)
    committed_by: str
    committed_points: float = 0
    task_count: int = 0
    participants: List[str] = Field(default_factory=list)


class SprintSettings(BaseModel):
    require_goal: bool = False
    require_estimates: bool = False
    enforce_capacity: bool = False


class SprintAuditEntry(BaseModel):
    action: str
    user_id: str
    timestamp: datetime = Field(default_factory=now)
    details: str = ""
    over_capacity: Optional[bool] = None
    justification: Optional[str] = None


class Sprint(BaseModel):
    """Sprint domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    organization_id: str
    project_id: str
    number: int
    name: str
    goal: Optional[str] = None
    status: str = SprintStatus.PLANNING
    start_date: datetime
    end_date: datetime
    capacity: SprintCapacity = Field(default_factory=SprintCapacity)
    team_capacity: List[TeamMemberCapacity] = Field(default_factory=list)
    estimation_method: str = "story_points"
    velocity: Optional[SprintVelocity] = None
    commitment: Optional[SprintCommitment] = None
    settings: SprintSettings = Field(default_factory=SprintSettings)
    audit_log: List[SprintAuditEntry] = Field(default_factory=list)
    over_capacity_warning: bool = False
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_by: str
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def is_planning(self) -> bool:
        return self.status == SprintStatus.PLANNING

    def is_active(self) -> bool:
        return self.status == SprintStatus.ACTIVE

    def is_completed(self) -> bool:
        return self.status == SprintStatus.COMPLETED

    def record(self, action: str, user_id: str, details: str, **extra) -> None:
        self.audit_log.append(SprintAuditEntry(action=action, user_id=user_id, details=details, **extra))

    def start(
        self,
        user_id: str,
        committed_points: float,
        task_count: int,
        utilization: int,
        over_capacity: bool,
        justification: Optional[str] = None,
        participants: Optional[List[str]] = None,
    ) -> None:
        """Activate the sprint with a commitment snapshot."""
        if not self.is_planning():
            raise ValidationError("Only sprints in planning can be started")
        self.status = SprintStatus.ACTIVE
        self.capacity.committed = committed_points
        self.velocity = SprintVelocity(planned=committed_points, completed=0)
        self.commitment = SprintCommitment(
            committed_by=user_id,
            committed_points=committed_points,
            task_count=task_count,
            participants=participants or [],
        )
        self.over_capacity_warning = over_capacity
        self.started_at = now()
        self.record(
            "sprint_started",
            user_id,
            f"Sprint started with {_fmt_points(committed_points)} points committed ({utilization}% capacity)",
            over_capacity=over_capacity,
            justification=justification,
        )
        self.updated_at = now()

    def complete(self, user_id: str, completed_points: float, average: Optional[float]) -> None:
        if not self.is_active():
            raise ValidationError("Only active sprints can be completed")
        self.status = SprintStatus.COMPLETED
        if self.velocity is None:
            self.velocity = SprintVelocity(planned=self.capacity.committed)
        self.velocity.completed = completed_points
        self.velocity.average = average
        self.completed_at = now()
        self.record(
            "sprint_completed",
            user_id,
            f"Sprint completed with {_fmt_points(completed_points)} of "
            f"{_fmt_points(self.velocity.planned)} points done",
        )
        self.updated_at = now()


def _fmt_points(points: float) -> str:
    return str(int(points)) if float(points).is_integer() else f"{points:g}"
