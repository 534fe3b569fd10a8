"""
Project Model
=============

Domain model for a project and its members. Project-level permissions are
derived from the member's project role; organization admins act as leads.
"""
import re
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.pm_constants import (
    Methodology,
    ProjectRole,
    ProjectStatus,
    ROLE_PERMISSIONS,
)
from servicedesk.utils.datetime_utils import now

PROJECT_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9]{1,9}$")


class ProjectMember(BaseModel):
    user_id: str
    role: str = ProjectRole.CONTRIBUTOR
    added_at: datetime = Field(default_factory=now)


class Project(BaseModel):
    """Project domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    organization_id: str
    key: str
    name: str
    description: Optional[str] = None
    methodology: str = Methodology.SCRUM
    status: str = ProjectStatus.ACTIVE
    lead_id: str
    members: List[ProjectMember] = Field(default_factory=list)
    team_ids: List[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_by: str
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @staticmethod
    def normalize_key(key: str) -> str:
        normalized = (key or "").strip().upper()
        if not PROJECT_KEY_PATTERN.match(normalized):
            raise ValidationError("Project key must be 2-10 letters or digits and start with a letter")
        return normalized

    def find_member(self, user_id: str) -> Optional[ProjectMember]:
        return next((m for m in self.members if m.user_id == user_id), None)

    def role_of(self, user_id: str) -> Optional[str]:
        member = self.find_member(user_id)
        return member.role if member else None

    def has_permission(self, user_id: str, permission: str, is_admin: bool = False) -> bool:
        """Check a project permission for a user."""
        if is_admin:
            return True
        role = self.role_of(user_id)
        if role is None:
            return False
        return permission in ROLE_PERMISSIONS.get(role, frozenset())

    def add_member(self, user_id: str, role: str = ProjectRole.CONTRIBUTOR) -> ProjectMember:
        if role not in ProjectRole.ALL:
            raise ValidationError(f"Invalid project role '{role}'")
        if self.find_member(user_id) is not None:
            raise ValidationError("User is already a project member")
        member = ProjectMember(user_id=user_id, role=role)
        self.members.append(member)
        self.updated_at = now()
        return member

    def remove_member(self, user_id: str) -> bool:
        if user_id == self.lead_id:
            raise ValidationError("The project lead cannot be removed")
        member = self.find_member(user_id)
        if member is None:
            return False
        self.members.remove(member)
        self.updated_at = now()
        return True

    def update_member_role(self, user_id: str, role: str) -> ProjectMember:
        if role not in ProjectRole.ALL:
            raise ValidationError(f"Invalid project role '{role}'")
        member = self.find_member(user_id)
        if member is None:
            raise NotFoundError("User is not a project member")
        member.role = role
        self.updated_at = now()
        return member

    def archive(self) -> None:
        self.status = ProjectStatus.ARCHIVED
        self.updated_at = now()

    def member_ids(self) -> List[str]:
        return [m.user_id for m in self.members]
