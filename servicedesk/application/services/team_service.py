"""
Team Service
============

Application service for teams and their membership.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from servicedesk.domain.constants.people_constants import TeamRole
from servicedesk.domain.models.team import Team
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.team_repository import TeamRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class TeamService:
    """
    Application service for team operations.

    Managers and admins manage every team; a team leader manages their own
    team's details and members.
    """

    def __init__(self, team_repository: TeamRepository, user_repository: UserRepository):
        self._teams = team_repository
        self._users = user_repository

    def create_team(
        self,
        organization_id: str,
        actor: User,
        name: str,
        description: Optional[str] = None,
        leader_id: Optional[str] = None,
    ) -> Team:
        """
        Create a team. The leader, when given, joins as its first member.

        Raises:
            ValidationError: If the name is blank
            NotFoundError: If the leader is not a user of the organization
        """
        if not name or not name.strip():
            raise ValidationError("Team name is required")
        team = Team(
            id=new_id(),
            organization_id=organization_id,
            name=name.strip(),
            description=description,
            created_by=actor.id,
        )
        if leader_id:
            self._org_user(organization_id, leader_id)
            team.add_member(leader_id, TeamRole.LEADER)

        created = self._teams.create(team)
        logger.info("Team created: %s (%s)", created.name, created.id)
        return created

    def list_teams(
        self,
        organization_id: str,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
    ) -> Tuple[List[Team], int]:
        return self._teams.find_page(organization_id, {}, page, limit, search)

    def get_team(self, organization_id: str, team_id: str) -> Team:
        team = self._teams.find_in_organization(organization_id, team_id)
        if team is None:
            raise NotFoundError.for_resource("Team", team_id)
        return team

    def update_team(
        self,
        organization_id: str,
        actor: User,
        team_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Team:
        team = self._manageable(organization_id, actor, team_id)
        if name is not None:
            if not name.strip():
                raise ValidationError("Team name is required")
            team.name = name.strip()
        if description is not None:
            team.description = description
        if is_active is not None:
            team.is_active = is_active
        return self._teams.update(team)

    def delete_team(self, organization_id: str, actor: User, team_id: str) -> None:
        if not actor.is_manager():
            raise AuthorizationError("Only managers can delete teams")
        self.get_team(organization_id, team_id)
        self._teams.delete(team_id)
        logger.info("Team deleted: %s", team_id)

    def add_member(self, organization_id: str, actor: User, team_id: str, user_id: str, role: str = TeamRole.MEMBER) -> Team:
        """
        Raises:
            NotFoundError: If the team or user does not exist
            ConflictError: If the user is already a member
        """
        team = self._manageable(organization_id, actor, team_id)
        self._org_user(organization_id, user_id)
        if team.is_member(user_id):
            raise ConflictError("User is already a member of this team")
        team.add_member(user_id, role)
        return self._teams.update(team)

    def remove_member(self, organization_id: str, actor: User, team_id: str, user_id: str) -> Team:
        team = self._manageable(organization_id, actor, team_id)
        if not team.remove_member(user_id):
            raise NotFoundError("User is not a member of this team")
        return self._teams.update(team)

    def update_member_role(self, organization_id: str, actor: User, team_id: str, user_id: str, role: str) -> Team:
        team = self._manageable(organization_id, actor, team_id)
        if not team.is_member(user_id):
            raise NotFoundError("User is not a member of this team")
        team.update_member_role(user_id, role)
        return self._teams.update(team)

    def list_members(self, organization_id: str, team_id: str) -> List[Dict[str, Any]]:
        """Members with their user names and emails."""
        team = self.get_team(organization_id, team_id)
        users = {u.id: u for u in self._users.find_by_ids([m.user_id for m in team.members])}
        members = []
        for member in team.members:
            user = users.get(member.user_id)
            members.append({
                "user_id": member.user_id,
                "role": member.role,
                "joined_at": member.joined_at,
                "name": user.name if user else None,
                "email": user.email if user else None,
            })
        return members

    def _manageable(self, organization_id: str, actor: User, team_id: str) -> Team:
        team = self.get_team(organization_id, team_id)
        if not (actor.is_manager() or team.is_leader(actor.id)):
            raise AuthorizationError("Only managers or the team leader can manage this team")
        return team

    def _org_user(self, organization_id: str, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None or user.organization_id != organization_id:
            raise NotFoundError.for_resource("User", user_id)
        return user
