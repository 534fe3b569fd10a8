"""
Team Model
==========

Domain model for a support or delivery team. A team has at most one leader.
"""
from datetime import datetime
from typing import List, Optional
from dataclasses import dataclass, field

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.people_constants import TeamRole
from servicedesk.utils.datetime_utils import now


@dataclass
class TeamMember:
    user_id: str
    role: str = TeamRole.MEMBER
    joined_at: datetime = field(default_factory=lambda: now())


@dataclass
class Team:
    """
    Team domain model.

    Membership rules are enforced here so every caller gets the same
    leader bookkeeping.
    """
    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    leader_id: Optional[str] = None
    members: List[TeamMember] = field(default_factory=list)
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def find_member(self, user_id: str) -> Optional[TeamMember]:
        return next((m for m in self.members if m.user_id == user_id), None)

    def is_member(self, user_id: str) -> bool:
        return self.find_member(user_id) is not None

    def is_leader(self, user_id: str) -> bool:
        return self.leader_id == user_id

    def add_member(self, user_id: str, role: str = TeamRole.MEMBER) -> TeamMember:
        """Add a member. Raises ValidationError if already a member."""
        if self.is_member(user_id):
            raise ValidationError("User is already a member of this team")
        member = TeamMember(user_id=user_id, role=role)
        self.members.append(member)
        if role == TeamRole.LEADER:
            self._promote(user_id)
        self.updated_at = now()
        return member

    def remove_member(self, user_id: str) -> bool:
        member = self.find_member(user_id)
        if member is None:
            return False
        self.members.remove(member)
        if self.leader_id == user_id:
            self.leader_id = None
        self.updated_at = now()
        return True

    def update_member_role(self, user_id: str, role: str) -> TeamMember:
        member = self.find_member(user_id)
        if member is None:
            raise NotFoundError("User is not a member of this team")
        if role == TeamRole.LEADER:
            self._promote(user_id)
        else:
            member.role = role
            if self.leader_id == user_id:
                self.leader_id = None
        self.updated_at = now()
        return member

    def _promote(self, user_id: str) -> None:
        # Only one leader at a time
        for member in self.members:
            if member.user_id == user_id:
                member.role = TeamRole.LEADER
            elif member.role == TeamRole.LEADER:
                member.role = TeamRole.MEMBER
        self.leader_id = user_id
