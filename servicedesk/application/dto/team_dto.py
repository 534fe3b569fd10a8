"""
Team DTO
========
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from servicedesk.domain.constants.people_constants import TeamRole
from servicedesk.domain.models.team import Team


class TeamCreateRequest(BaseModel):
    """DTO for creating a team."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    leader_id: Optional[str] = None


class TeamUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None


class TeamMemberRequest(BaseModel):
    user_id: str
    role: str = Field(TeamRole.MEMBER, pattern="^(leader|member)$")


class TeamMemberRoleRequest(BaseModel):
    role: str = Field(..., pattern="^(leader|member)$")


class TeamMemberResponse(BaseModel):
    user_id: str
    role: str
    joined_at: datetime
    name: Optional[str] = None
    email: Optional[str] = None


class TeamResponse(BaseModel):
    """DTO for team data."""
    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    leader_id: Optional[str] = None
    members: List[TeamMemberResponse]
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, team: Team) -> "TeamResponse":
        return cls(
            id=team.id,
            organization_id=team.organization_id,
            name=team.name,
            description=team.description,
            leader_id=team.leader_id,
            members=[TeamMemberResponse(user_id=m.user_id, role=m.role, joined_at=m.joined_at) for m in team.members],
            is_active=team.is_active,
            created_by=team.created_by,
            created_at=team.created_at,
            updated_at=team.updated_at,
        )
