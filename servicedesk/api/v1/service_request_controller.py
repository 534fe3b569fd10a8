"""
Service Request Controller
==========================

Requests raised against catalog items, addressed by id or SRQ ticket id.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_organization_id, get_service_catalog_service
from servicedesk.application.dto.incident_dto import AssignRequest
from servicedesk.application.dto.service_catalog_dto import (
    ApprovalDecisionRequest,
    FulfillRequest,
    ServiceRequestCreateRequest,
)
from servicedesk.application.services.service_catalog_service import ServiceCatalogService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["service-requests"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Request a catalog service",
    description="Items that need approval start in pending_approval; others start submitted.",
)
def create_request(
    body: ServiceRequestCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    service_request = service.create_request(
        organization_id,
        user,
        service_id=body.service_id,
        form_data=body.form_data,
        priority=body.priority,
        site_id=body.site_id,
    )
    return success(service_request, "Service request submitted")


@router.get("", summary="List service requests")
def list_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    requester_id: Optional[str] = None,
    service_id: Optional[str] = None,
    assigned_to: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    requests, total = service.list_requests(
        organization_id,
        status=status_filter,
        priority=priority,
        requester_id=requester_id,
        service_id=service_id,
        assigned_to=assigned_to,
        search=search,
        page=page,
        limit=limit,
    )
    return paginated(requests, page, limit, total)


@router.get("/mine", summary="Requests raised by the current user")
def my_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    requests, total = service.list_requests(organization_id, requester_id=user.id, page=page, limit=limit)
    return paginated(requests, page, limit, total)


@router.get("/stats", summary="Service request counts")
def request_stats(
    organization_id: str = Depends(get_organization_id),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    return success(service.stats(organization_id))


@router.get("/{request_id}", summary="Get a service request")
def get_request(
    request_id: str,
    organization_id: str = Depends(get_organization_id),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    return success(service.get_request(organization_id, request_id))


@router.post("/{request_id}/approval", summary="Approve or reject the current approval step")
def decide(
    request_id: str,
    body: ApprovalDecisionRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    service_request = service.decide(organization_id, user, request_id, body.approved, body.comments)
    return success(service_request, "Request approved" if body.approved else "Request rejected")


@router.post("/{request_id}/assign", summary="Assign a service request")
def assign_request(
    request_id: str,
    body: AssignRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    service_request = service.assign(
        organization_id,
        user,
        request_id,
        technician_id=body.technician_id,
        group_id=body.group_id,
        group_name=body.group_name,
    )
    return success(service_request, "Request assigned")


@router.post("/{request_id}/fulfill", summary="Mark a request fulfilled")
def fulfill_request(
    request_id: str,
    body: FulfillRequest = FulfillRequest(),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    return success(service.fulfill(organization_id, user, request_id, body.notes), "Request fulfilled")


@router.post("/{request_id}/cancel", summary="Cancel a request")
def cancel_request(
    request_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    return success(service.cancel(organization_id, user, request_id), "Request cancelled")
