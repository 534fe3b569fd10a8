"""
Sprint DTO
==========
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator


class SprintCreateRequest(BaseModel):
    """DTO for creating a sprint. The name defaults to "Sprint N"."""
    name: Optional[str] = Field(None, max_length=100)
    goal: Optional[str] = Field(None, max_length=2000)
    start_date: datetime
    end_date: datetime
    capacity_planned: Optional[float] = Field(None, ge=0)
    capacity_available: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def _end_after_start(self) -> "SprintCreateRequest":
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class SprintUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    goal: Optional[str] = Field(None, max_length=2000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    capacity_planned: Optional[float] = Field(None, ge=0)
    capacity_available: Optional[float] = Field(None, ge=0)


class StartSprintRequest(BaseModel):
    skip_validation: bool = False
    over_capacity_justification: Optional[str] = Field(None, max_length=2000)
    participants: List[str] = Field(default_factory=list)


class CompleteSprintRequest(BaseModel):
    # Incomplete tasks go to the backlog unless a planning sprint is named
    move_to_sprint_id: Optional[str] = None


class TeamMemberCapacityInput(BaseModel):
    user_id: str
    available_days: float = Field(10, gt=0)
    hours_per_day: float = Field(8, gt=0, le=24)
    planned_leave: float = Field(0, ge=0)
    meeting_hours: float = Field(0, ge=0)


class TeamCapacityRequest(BaseModel):
    team_capacity: List[TeamMemberCapacityInput]


class SprintSettingsRequest(BaseModel):
    require_goal: Optional[bool] = None
    require_estimates: Optional[bool] = None
    enforce_capacity: Optional[bool] = None


class SprintTasksRequest(BaseModel):
    task_ids: List[str] = Field(..., min_length=1)
