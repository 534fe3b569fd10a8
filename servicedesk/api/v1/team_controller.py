"""
Team Controller
===============

Teams of the selected organization and their members.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_organization_id, get_team_service
from servicedesk.application.dto.team_dto import (
    TeamCreateRequest,
    TeamMemberRequest,
    TeamMemberRoleRequest,
    TeamResponse,
    TeamUpdateRequest,
)
from servicedesk.application.services.team_service import TeamService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["teams"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a team")
def create_team(
    body: TeamCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
):
    team = service.create_team(organization_id, user, body.name, body.description, body.leader_id)
    return success(TeamResponse.from_entity(team), "Team created")


@router.get("", summary="List teams")
def list_teams(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    organization_id: str = Depends(get_organization_id),
    service: TeamService = Depends(get_team_service),
):
    teams, total = service.list_teams(organization_id, page=page, limit=limit, search=search)
    return paginated([TeamResponse.from_entity(t) for t in teams], page, limit, total)


@router.get("/{team_id}", summary="Get a team")
def get_team(
    team_id: str,
    organization_id: str = Depends(get_organization_id),
    service: TeamService = Depends(get_team_service),
):
    return success(TeamResponse.from_entity(service.get_team(organization_id, team_id)))


@router.put("/{team_id}", summary="Update a team")
def update_team(
    team_id: str,
    body: TeamUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
):
    team = service.update_team(
        organization_id,
        user,
        team_id,
        name=body.name,
        description=body.description,
        is_active=body.is_active,
    )
    return success(TeamResponse.from_entity(team), "Team updated")


@router.delete("/{team_id}", summary="Delete a team")
def delete_team(
    team_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
):
    service.delete_team(organization_id, user, team_id)
    return success(message="Team deleted")


@router.get("/{team_id}/members", summary="List team members")
def list_members(
    team_id: str,
    organization_id: str = Depends(get_organization_id),
    service: TeamService = Depends(get_team_service),
):
    return success(service.list_members(organization_id, team_id))


@router.post("/{team_id}/members", status_code=status.HTTP_201_CREATED, summary="Add a team member")
def add_member(
    team_id: str,
    body: TeamMemberRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
):
    team = service.add_member(organization_id, user, team_id, body.user_id, body.role)
    return success(TeamResponse.from_entity(team), "Member added")


@router.put("/{team_id}/members/{user_id}", summary="Change a member's role")
def update_member_role(
    team_id: str,
    user_id: str,
    body: TeamMemberRoleRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
):
    team = service.update_member_role(organization_id, user, team_id, user_id, body.role)
    return success(TeamResponse.from_entity(team), "Member role updated")


@router.delete("/{team_id}/members/{user_id}", summary="Remove a team member")
def remove_member(
    team_id: str,
    user_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
):
    team = service.remove_member(organization_id, user, team_id, user_id)
    return success(TeamResponse.from_entity(team), "Member removed")
