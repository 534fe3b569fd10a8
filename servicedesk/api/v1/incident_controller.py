"""
Incident Controller
===================

Incidents are addressed by id or by ticket id (INC-YYYY-NNNNN).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_incident_service, get_organization_id
from servicedesk.application.dto.incident_dto import (
    AssignRequest,
    EscalateRequest,
    IncidentCommentRequest,
    IncidentCreateRequest,
    IncidentResolveRequest,
    IncidentStatusRequest,
    IncidentUpdateRequest,
    LinkProblemRequest,
    WorklogRequest,
)
from servicedesk.application.services.incident_service import IncidentService
from servicedesk.domain.models.itsm_common import PersonRef
from servicedesk.domain.models.user import User

router = APIRouter(tags=["incidents"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Log an incident",
    description="Priority comes from the impact x urgency matrix; SLA due dates from the matching policy.",
)
def create_incident(
    body: IncidentCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    incident = service.create_incident(
        organization_id,
        user,
        title=body.title,
        description=body.description,
        impact=body.impact,
        urgency=body.urgency,
        category_id=body.category_id,
        subcategory_id=body.subcategory_id,
        channel=body.channel,
        requester=PersonRef(**body.requester.model_dump()) if body.requester else None,
        site_id=body.site_id,
        tags=body.tags,
        is_major=body.is_major,
    )
    return success(incident, "Incident created")


@router.get("", summary="List incidents")
def list_incidents(
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    assigned_to: Optional[str] = None,
    requester_id: Optional[str] = None,
    site_id: Optional[str] = None,
    category_id: Optional[str] = None,
    is_major: Optional[bool] = None,
    breached: Optional[bool] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    service: IncidentService = Depends(get_incident_service),
):
    incidents, total = service.list_incidents(
        organization_id,
        status=status_filter,
        priority=priority,
        assigned_to=assigned_to,
        requester_id=requester_id,
        site_id=site_id,
        category_id=category_id,
        is_major=is_major,
        breached=breached,
        search=search,
        page=page,
        limit=limit,
    )
    return paginated(incidents, page, limit, total)


@router.get("/stats", summary="Incident counts and SLA compliance")
def incident_stats(
    organization_id: str = Depends(get_organization_id),
    service: IncidentService = Depends(get_incident_service),
):
    return success(service.stats(organization_id))


@router.get("/{incident_id}", summary="Get an incident")
def get_incident(
    incident_id: str,
    organization_id: str = Depends(get_organization_id),
    service: IncidentService = Depends(get_incident_service),
):
    return success(service.get_incident(organization_id, incident_id))


@router.patch("/{incident_id}", summary="Update incident details")
def update_incident(
    incident_id: str,
    body: IncidentUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    incident = service.update_incident(organization_id, user, incident_id, body.model_dump(exclude_unset=True))
    return success(incident, "Incident updated")


@router.patch("/{incident_id}/status", summary="Change incident status")
def change_status(
    incident_id: str,
    body: IncidentStatusRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    incident = service.change_status(organization_id, user, incident_id, body.status, body.note)
    return success(incident, f"Incident status changed to {incident.status}")


@router.post("/{incident_id}/assign", summary="Assign an incident to a technician")
def assign_incident(
    incident_id: str,
    body: AssignRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    incident = service.assign(
        organization_id,
        user,
        incident_id,
        technician_id=body.technician_id,
        group_id=body.group_id,
        group_name=body.group_name,
    )
    return success(incident, "Incident assigned")


@router.post("/{incident_id}/resolve", summary="Resolve an incident")
def resolve_incident(
    incident_id: str,
    body: IncidentResolveRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    incident = service.resolve(organization_id, user, incident_id, body.resolution_code, body.resolution_notes)
    return success(incident, "Incident resolved")


@router.post("/{incident_id}/worklogs", status_code=status.HTTP_201_CREATED, summary="Log work on an incident")
def add_worklog(
    incident_id: str,
    body: WorklogRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    worklog = service.add_worklog(
        organization_id,
        user,
        incident_id,
        minutes_spent=body.minutes_spent,
        note=body.note,
        is_internal=body.is_internal,
    )
    return success(worklog, "Worklog added")


@router.post("/{incident_id}/escalate", summary="Escalate an incident one level")
def escalate_incident(
    incident_id: str,
    body: EscalateRequest = EscalateRequest(),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    return success(service.escalate(organization_id, user, incident_id, body.reason), "Incident escalated")


@router.post("/{incident_id}/link-problem", summary="Link an incident to a problem")
def link_problem(
    incident_id: str,
    body: LinkProblemRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    return success(service.link_problem(organization_id, user, incident_id, body.problem_id), "Problem linked")


@router.post("/{incident_id}/comments", status_code=status.HTTP_201_CREATED, summary="Comment on an incident")
def add_comment(
    incident_id: str,
    body: IncidentCommentRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: IncidentService = Depends(get_incident_service),
):
    incident = service.add_comment(organization_id, user, incident_id, body.content, body.is_internal)
    return success(incident, "Comment added")
