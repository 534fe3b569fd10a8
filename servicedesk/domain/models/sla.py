"""
SLA Policy Model
================

Response/resolution targets for one priority, optionally counted in
business hours, with an escalation matrix.
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from servicedesk.domain.constants.itsm_constants import Priority
from servicedesk.utils.datetime_utils import now


class TimeTarget(BaseModel):
    hours: float
    business_hours_only: bool = False

    @field_validator("hours")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("SLA hours cannot be negative")
        return value


class BusinessDay(BaseModel):
    day: int  # 0 = Sunday ... 6 = Saturday
    start_time: str = "09:00"
    end_time: str = "17:00"
    is_working: bool = True

    @field_validator("day")
    @classmethod
    def _valid_day(cls, value: int) -> int:
        if not 0 <= value <= 6:
            raise ValueError("day must be between 0 (Sunday) and 6 (Saturday)")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_time(cls, value: str) -> str:
        parts = value.split(":")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError("time must be HH:mm")
        hour, minute = int(parts[0]), int(parts[1])
        if not (0 <= hour <= 24 and 0 <= minute < 60):
            raise ValueError("time must be HH:mm")
        return value


class BusinessHours(BaseModel):
    timezone: str = "UTC"
    schedule: List[BusinessDay] = Field(default_factory=list)
    holidays: List[date] = Field(default_factory=list)

    def day_schedule(self, weekday: int) -> Optional[BusinessDay]:
        return next((d for d in self.schedule if d.day == weekday), None)


class EscalationLevel(BaseModel):
    level: int
    after_minutes: int
    notify_role: str = "manager"
    notify_users: List[str] = Field(default_factory=list)
    action: Optional[str] = None


class SLAScope(BaseModel):
    categories: List[str] = Field(default_factory=list)
    sites: List[str] = Field(default_factory=list)


class SLAPolicy(BaseModel):
    """SLA policy domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    sla_id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    priority: str = Priority.MEDIUM
    response_time: TimeTarget
    resolution_time: TimeTarget
    business_hours: Optional[BusinessHours] = None
    escalation_matrix: List[EscalationLevel] = Field(default_factory=list)
    applies_to: SLAScope = Field(default_factory=SLAScope)
    is_default: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def applies_to_category(self, category_id: Optional[str]) -> bool:
        return bool(category_id) and category_id in self.applies_to.categories

    def applies_to_site(self, site_id: Optional[str]) -> bool:
        return bool(site_id) and site_id in self.applies_to.sites

    def escalation_for(self, level: int) -> Optional[EscalationLevel]:
        return next((e for e in self.escalation_matrix if e.level == level), None)
