"""
Change Controller
=================

Change requests from draft through CAB review to implementation.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_change_service, get_current_user, get_organization_id
from servicedesk.application.dto.change_dto import (
    CabDecisionRequest,
    ChangeCompleteRequest,
    ChangeCreateRequest,
    ChangeScheduleRequest,
    ChangeUpdateRequest,
)
from servicedesk.application.dto.common_dto import CancelRequest
from servicedesk.application.services.change_service import ChangeService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["changes"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Raise a change request (draft)")
def create_change(
    body: ChangeCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    change = service.create_change(organization_id, user, **body.model_dump())
    return success(change, "Change created")


@router.get("", summary="List changes")
def list_changes(
    status_filter: Optional[str] = Query(None, alias="status"),
    type: Optional[str] = None,
    risk: Optional[str] = None,
    priority: Optional[str] = None,
    requested_by: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    service: ChangeService = Depends(get_change_service),
):
    changes, total = service.list_changes(
        organization_id,
        status=status_filter,
        type=type,
        risk=risk,
        priority=priority,
        requested_by=requested_by,
        search=search,
        page=page,
        limit=limit,
    )
    return paginated(changes, page, limit, total)


@router.get("/stats", summary="Change counts")
def change_stats(
    organization_id: str = Depends(get_organization_id),
    service: ChangeService = Depends(get_change_service),
):
    return success(service.stats(organization_id))


@router.get("/{change_id}", summary="Get a change")
def get_change(
    change_id: str,
    organization_id: str = Depends(get_organization_id),
    service: ChangeService = Depends(get_change_service),
):
    return success(service.get_change(organization_id, change_id))


@router.patch("/{change_id}", summary="Edit a draft or rejected change")
def update_change(
    change_id: str,
    body: ChangeUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    change = service.update_change(organization_id, user, change_id, body.model_dump(exclude_unset=True))
    return success(change, "Change updated")


@router.post(
    "/{change_id}/submit",
    summary="Submit a draft change",
    description="""
    Requires implementation and rollback plans, a risk assessment, affected
    services and a schedule. Goes to CAB review, or straight to approved
    when no CAB is required.
    """
)
def submit_change(
    change_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    return success(service.submit(organization_id, user, change_id), "Change submitted")


@router.post("/{change_id}/cab-decision", summary="Record a CAB member's vote")
def cab_decision(
    change_id: str,
    body: CabDecisionRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    change = service.record_cab_decision(organization_id, user, change_id, body.decision, body.comments)
    return success(change, "Decision recorded")


@router.post("/{change_id}/schedule", summary="Schedule an approved change")
def schedule_change(
    change_id: str,
    body: ChangeScheduleRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    change = service.schedule(
        organization_id,
        user,
        change_id,
        planned_start=body.planned_start,
        planned_end=body.planned_end,
        maintenance_window=body.maintenance_window,
    )
    return success(change, "Change scheduled")


@router.post("/{change_id}/implement", summary="Start implementing a scheduled change")
def start_implementation(
    change_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    return success(service.start_implementation(organization_id, user, change_id), "Implementation started")


@router.post("/{change_id}/complete", summary="Close implementation as completed or failed")
def complete_change(
    change_id: str,
    body: ChangeCompleteRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    change = service.complete(organization_id, user, change_id, success=body.success, notes=body.notes)
    return success(change, "Change completed" if body.success else "Change marked as failed")


@router.post("/{change_id}/cancel", summary="Cancel a change")
def cancel_change(
    change_id: str,
    body: CancelRequest = CancelRequest(),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ChangeService = Depends(get_change_service),
):
    return success(service.cancel(organization_id, user, change_id, body.reason), "Change cancelled")
