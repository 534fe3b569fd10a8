"""
Organization Controller
=======================

The selected organization and its users. Membership changes are admin only.
"""
from fastapi import APIRouter, Depends, status

from servicedesk.api.responses import success
from servicedesk.api.v1.dependencies import get_current_user, get_organization_id, get_organization_service
from servicedesk.application.dto.auth_dto import (
    OrganizationMemberRequest,
    OrganizationMemberRoleRequest,
    OrganizationResponse,
    OrganizationUpdateRequest,
    UserResponse,
)
from servicedesk.application.services.organization_service import OrganizationService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["organizations"])


@router.get("/current", summary="Selected organization")
def get_organization(
    organization_id: str = Depends(get_organization_id),
    service: OrganizationService = Depends(get_organization_service),
):
    return success(OrganizationResponse.from_entity(service.get(organization_id)))


@router.put("/current", summary="Rename the selected organization (admin)")
def update_organization(
    body: OrganizationUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: OrganizationService = Depends(get_organization_service),
):
    organization = service.rename(organization_id, user, body.name)
    return success(OrganizationResponse.from_entity(organization), "Organization updated")


@router.get("/current/members", summary="Users of the selected organization")
def list_members(
    organization_id: str = Depends(get_organization_id),
    service: OrganizationService = Depends(get_organization_service),
):
    return success([UserResponse.from_entity(u) for u in service.list_members(organization_id)])


@router.post(
    "/current/members",
    status_code=status.HTTP_201_CREATED,
    summary="Add a registered user to the organization (admin)",
)
def add_member(
    body: OrganizationMemberRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: OrganizationService = Depends(get_organization_service),
):
    member = service.add_member(organization_id, user, body.email, body.role)
    return success(UserResponse.from_entity(member), "Member added")


@router.put("/current/members/{user_id}", summary="Change a member's organization role (admin)")
def update_member_role(
    user_id: str,
    body: OrganizationMemberRoleRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: OrganizationService = Depends(get_organization_service),
):
    member = service.update_member_role(organization_id, user, user_id, body.role)
    return success(UserResponse.from_entity(member), "Member role updated")


@router.delete("/current/members/{user_id}", summary="Remove a member from the organization (admin)")
def remove_member(
    user_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: OrganizationService = Depends(get_organization_service),
):
    service.remove_member(organization_id, user, user_id)
    return success(message="Member removed")
