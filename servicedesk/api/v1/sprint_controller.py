"""
Sprint Controller
=================

Sprint planning, start/complete lifecycle, capacity and insights.
"""
from fastapi import APIRouter, Depends, status

from servicedesk.api.responses import success
from servicedesk.api.v1.dependencies import get_current_user, get_organization_id, get_sprint_service
from servicedesk.application.dto.sprint_dto import (
    CompleteSprintRequest,
    SprintCreateRequest,
    SprintSettingsRequest,
    SprintTasksRequest,
    SprintUpdateRequest,
    StartSprintRequest,
    TeamCapacityRequest,
)
from servicedesk.application.services.sprint_service import SprintService
from servicedesk.domain.models.sprint import TeamMemberCapacity
from servicedesk.domain.models.user import User

router = APIRouter(tags=["sprints"])


@router.post("/projects/{project_id}/sprints", status_code=status.HTTP_201_CREATED, summary="Create a sprint")
def create_sprint(
    project_id: str,
    body: SprintCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    sprint = service.create_sprint(
        organization_id,
        user,
        project_id,
        start_date=body.start_date,
        end_date=body.end_date,
        name=body.name,
        goal=body.goal,
        capacity_planned=body.capacity_planned,
        capacity_available=body.capacity_available,
    )
    return success(sprint, "Sprint created")


@router.get("/projects/{project_id}/sprints", summary="List a project's sprints with progress stats")
def list_sprints(
    project_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    return success(service.list_sprints(organization_id, user, project_id))


@router.get("/projects/{project_id}/backlog", summary="Tasks not in any sprint")
def get_backlog(
    project_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    return success(service.backlog(organization_id, user, project_id))


@router.get("/sprints/{sprint_id}", summary="Get a sprint")
def get_sprint(
    sprint_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    return success(service.get_sprint(organization_id, user, sprint_id))


@router.put("/sprints/{sprint_id}", summary="Update a sprint")
def update_sprint(
    sprint_id: str,
    body: SprintUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    sprint = service.update_sprint(
        organization_id,
        user,
        sprint_id,
        name=body.name,
        goal=body.goal,
        start_date=body.start_date,
        end_date=body.end_date,
        capacity_planned=body.capacity_planned,
        capacity_available=body.capacity_available,
    )
    return success(sprint, "Sprint updated")


@router.delete("/sprints/{sprint_id}", summary="Delete a sprint; its tasks return to the backlog")
def delete_sprint(
    sprint_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    service.delete_sprint(organization_id, user, sprint_id)
    return success(message="Sprint deleted")


@router.post(
    "/sprints/{sprint_id}/start",
    summary="Start a sprint",
    description="""
    Only a planning sprint can start, and only one sprint per project can be
    active. Unless `skip_validation` is set, the sprint settings
    (require_goal, require_estimates, enforce_capacity) are checked.
    Starting over capacity with `skip_validation` needs a justification.
    """
)
def start_sprint(
    sprint_id: str,
    body: StartSprintRequest = StartSprintRequest(),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    sprint = service.start_sprint(
        organization_id,
        user,
        sprint_id,
        skip_validation=body.skip_validation,
        over_capacity_justification=body.over_capacity_justification,
        participants=body.participants,
    )
    return success(sprint, "Sprint started")


@router.post(
    "/sprints/{sprint_id}/complete",
    summary="Complete an active sprint",
    description="Unfinished tasks move to the backlog, or to `move_to_sprint_id` when it names a planning sprint.",
)
def complete_sprint(
    sprint_id: str,
    body: CompleteSprintRequest = CompleteSprintRequest(),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    result = service.complete_sprint(organization_id, user, sprint_id, move_to_sprint_id=body.move_to_sprint_id)
    return success(result, "Sprint completed")


@router.get("/sprints/{sprint_id}/tasks", summary="Tasks of a sprint")
def get_sprint_tasks(
    sprint_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    return success(service.get_sprint_tasks(organization_id, user, sprint_id))


@router.post("/sprints/{sprint_id}/tasks", summary="Pull tasks into a sprint")
def add_tasks(
    sprint_id: str,
    body: SprintTasksRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    moved = service.add_tasks(organization_id, user, sprint_id, body.task_ids)
    return success({"moved": moved}, f"{moved} task(s) added to sprint")


@router.post("/sprints/{sprint_id}/tasks/remove", summary="Return tasks to the backlog")
def remove_tasks(
    sprint_id: str,
    body: SprintTasksRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    moved = service.remove_tasks(organization_id, user, sprint_id, body.task_ids)
    return success({"moved": moved}, f"{moved} task(s) removed from sprint")


@router.get("/sprints/{sprint_id}/insights", summary="Progress metrics and on-track analysis")
def get_insights(
    sprint_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    return success(service.insights(organization_id, user, sprint_id))


@router.get("/sprints/{sprint_id}/planning", summary="Planning summary and start readiness")
def get_planning_summary(
    sprint_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    return success(service.planning_summary(organization_id, user, sprint_id))


@router.put("/sprints/{sprint_id}/capacity", summary="Set per-member capacity (planning sprints only)")
def update_capacity(
    sprint_id: str,
    body: TeamCapacityRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    team_capacity = [TeamMemberCapacity(**member.model_dump()) for member in body.team_capacity]
    result = service.update_team_capacity(organization_id, user, sprint_id, team_capacity)
    return success(result, "Team capacity updated")


@router.put("/sprints/{sprint_id}/settings", summary="Update sprint start rules")
def update_settings(
    sprint_id: str,
    body: SprintSettingsRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: SprintService = Depends(get_sprint_service),
):
    sprint = service.update_settings(
        organization_id,
        user,
        sprint_id,
        require_goal=body.require_goal,
        require_estimates=body.require_estimates,
        enforce_capacity=body.enforce_capacity,
    )
    return success(sprint, "Sprint settings updated")
