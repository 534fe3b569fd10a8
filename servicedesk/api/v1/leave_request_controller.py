"""
Leave Request Controller
========================

Vacations, sick days and team-wide holidays or blackouts.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_leave_request_service, get_organization_id
from servicedesk.application.dto.leave_request_dto import (
    LeaveRequestCreateRequest,
    LeaveRequestResponse,
    LeaveRequestUpdateRequest,
    LeaveReviewRequest,
)
from servicedesk.application.services.leave_request_service import LeaveRequestService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["leave-requests"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Request leave",
    description="Holidays and blackouts are approved on creation; other types wait for review.",
)
def create_leave_request(
    body: LeaveRequestCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    leave = service.create(
        organization_id,
        user,
        team_id=body.team_id,
        type=body.type,
        start_date=body.start_date,
        end_date=body.end_date,
        reason=body.reason,
    )
    return success(LeaveRequestResponse.from_entity(leave), "Leave request created")


@router.get("", summary="List leave requests overlapping a date range")
def list_leave_requests(
    team_id: Optional[str] = None,
    type: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    filters = {"team_id": team_id, "type": type, "status": status_filter, "user_id": user_id}
    leaves, total = service.list_requests(
        organization_id,
        filters=filters,
        range_start=start_date,
        range_end=end_date,
        page=page,
        limit=limit,
    )
    return paginated([LeaveRequestResponse.from_entity(leave) for leave in leaves], page, limit, total)


@router.get("/mine", summary="The current user's leave requests")
def my_leave_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    leaves, total = service.list_requests(
        organization_id,
        filters={"user_id": user.id, "status": status_filter},
        page=page,
        limit=limit,
    )
    return paginated([LeaveRequestResponse.from_entity(leave) for leave in leaves], page, limit, total)


@router.get("/{leave_id}", summary="Get a leave request")
def get_leave_request(
    leave_id: str,
    organization_id: str = Depends(get_organization_id),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    return success(LeaveRequestResponse.from_entity(service.get(organization_id, leave_id)))


@router.put("/{leave_id}", summary="Edit a pending leave request")
def update_leave_request(
    leave_id: str,
    body: LeaveRequestUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    leave = service.update(
        organization_id,
        user,
        leave_id,
        type=body.type,
        start_date=body.start_date,
        end_date=body.end_date,
        reason=body.reason,
    )
    return success(LeaveRequestResponse.from_entity(leave), "Leave request updated")


@router.delete("/{leave_id}", summary="Withdraw a pending leave request")
def delete_leave_request(
    leave_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    service.delete(organization_id, user, leave_id)
    return success(message="Leave request deleted")


@router.post("/{leave_id}/approve", summary="Approve a leave request")
def approve_leave_request(
    leave_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    leave = service.approve(organization_id, user, leave_id)
    return success(LeaveRequestResponse.from_entity(leave), "Leave request approved")


@router.post("/{leave_id}/reject", summary="Reject a leave request")
def reject_leave_request(
    leave_id: str,
    body: LeaveReviewRequest = LeaveReviewRequest(),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    leave = service.reject(organization_id, user, leave_id, body.note)
    return success(LeaveRequestResponse.from_entity(leave), "Leave request rejected")
