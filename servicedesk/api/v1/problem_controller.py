"""
Problem Controller
==================
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_organization_id, get_problem_service
from servicedesk.application.dto.problem_dto import (
    KnownErrorRequest,
    LinkIncidentRequest,
    ProblemCreateRequest,
    ProblemResolveRequest,
    ProblemStatusRequest,
    ProblemUpdateRequest,
    RootCauseRequest,
)
from servicedesk.application.services.problem_service import ProblemService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["problems"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Log a problem")
def create_problem(
    body: ProblemCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    problem = service.create_problem(organization_id, user, **body.model_dump())
    return success(problem, "Problem created")


@router.post(
    "/from-incident/{incident_id}",
    status_code=status.HTTP_201_CREATED,
    summary="Raise a problem from an incident",
)
def create_from_incident(
    incident_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    problem = service.create_from_incident(organization_id, user, incident_id)
    return success(problem, "Problem created from incident")


@router.get("", summary="List problems")
def list_problems(
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    owner_id: Optional[str] = None,
    category_id: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    service: ProblemService = Depends(get_problem_service),
):
    problems, total = service.list_problems(
        organization_id,
        status=status_filter,
        priority=priority,
        owner_id=owner_id,
        category_id=category_id,
        search=search,
        page=page,
        limit=limit,
    )
    return paginated(problems, page, limit, total)


@router.get("/stats", summary="Problem counts")
def problem_stats(
    organization_id: str = Depends(get_organization_id),
    service: ProblemService = Depends(get_problem_service),
):
    return success(service.stats(organization_id))


@router.get("/{problem_id}", summary="Get a problem")
def get_problem(
    problem_id: str,
    organization_id: str = Depends(get_organization_id),
    service: ProblemService = Depends(get_problem_service),
):
    return success(service.get_problem(organization_id, problem_id))


@router.patch("/{problem_id}", summary="Update a problem")
def update_problem(
    problem_id: str,
    body: ProblemUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    problem = service.update_problem(organization_id, user, problem_id, body.model_dump(exclude_unset=True))
    return success(problem, "Problem updated")


@router.post("/{problem_id}/root-cause", summary="Record the root cause")
def set_root_cause(
    problem_id: str,
    body: RootCauseRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    problem = service.set_root_cause(organization_id, user, problem_id, body.root_cause, body.workaround)
    return success(problem, "Root cause recorded")


@router.post("/{problem_id}/known-error", summary="Publish a known error")
def create_known_error(
    problem_id: str,
    body: KnownErrorRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    problem = service.create_known_error(
        organization_id,
        user,
        problem_id,
        title=body.title,
        symptoms=body.symptoms,
        root_cause=body.root_cause,
        workaround=body.workaround,
    )
    return success(problem, "Known error created")


@router.post("/{problem_id}/link-incident", summary="Link an incident")
def link_incident(
    problem_id: str,
    body: LinkIncidentRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    return success(service.link_incident(organization_id, user, problem_id, body.incident_id), "Incident linked")


@router.patch("/{problem_id}/status", summary="Change problem status")
def change_status(
    problem_id: str,
    body: ProblemStatusRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    return success(service.change_status(organization_id, user, problem_id, body.status), "Problem status updated")


@router.post("/{problem_id}/resolve", summary="Resolve with a permanent fix")
def resolve_problem(
    problem_id: str,
    body: ProblemResolveRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProblemService = Depends(get_problem_service),
):
    return success(service.resolve(organization_id, user, problem_id, body.permanent_fix), "Problem resolved")
