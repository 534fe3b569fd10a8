"""
SLA Controller
==============

SLA policies and the breach sweep.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_organization_id, get_sla_service, require_manager
from servicedesk.application.dto.sla_dto import SLACreateRequest, SLAUpdateRequest
from servicedesk.application.services.sla_service import SLAService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["sla"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create an SLA policy")
def create_policy(
    body: SLACreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: SLAService = Depends(get_sla_service),
):
    policy = service.create_policy(organization_id, **body.model_dump())
    return success(policy, "SLA policy created")


@router.get("", summary="List SLA policies")
def list_policies(
    priority: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    organization_id: str = Depends(get_organization_id),
    service: SLAService = Depends(get_sla_service),
):
    policies, total = service.list_policies(
        organization_id, priority=priority, is_active=is_active, page=page, limit=limit
    )
    return paginated(policies, page, limit, total)


@router.post(
    "/sweep",
    summary="Check open incidents for SLA breaches",
    description="Flags breached incidents, raises their escalation level and notifies the assignee.",
)
def sweep_breaches(
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: SLAService = Depends(get_sla_service),
):
    return success(service.sweep_breaches(organization_id))


@router.get("/{policy_id}", summary="Get an SLA policy")
def get_policy(
    policy_id: str,
    organization_id: str = Depends(get_organization_id),
    service: SLAService = Depends(get_sla_service),
):
    return success(service.get_policy(organization_id, policy_id))


@router.patch("/{policy_id}", summary="Update an SLA policy")
def update_policy(
    policy_id: str,
    body: SLAUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: SLAService = Depends(get_sla_service),
):
    policy = service.update_policy(organization_id, policy_id, body.model_dump(exclude_unset=True))
    return success(policy, "SLA policy updated")


@router.delete("/{policy_id}", summary="Delete an SLA policy")
def delete_policy(
    policy_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: SLAService = Depends(get_sla_service),
):
    service.delete_policy(organization_id, policy_id)
    return success(message="SLA policy deleted")
