"""
Project Controller
==================

Projects, project members, the project workflow and the project board.
"""
from fastapi import APIRouter, Depends, status

from servicedesk.api.responses import success
from servicedesk.api.v1.dependencies import (
    get_board_service,
    get_current_user,
    get_organization_id,
    get_project_service,
    get_workflow_service,
)
from servicedesk.application.dto.project_dto import (
    ColumnCreateRequest,
    ColumnReorderRequest,
    ColumnUpdateRequest,
    MoveTaskRequest,
    ProjectCreateRequest,
    ProjectMemberRequest,
    ProjectMemberRoleRequest,
    ProjectUpdateRequest,
    WorkflowUpdateRequest,
    to_workflow_statuses,
    to_workflow_transitions,
)
from servicedesk.application.services.board_service import BoardService
from servicedesk.application.services.project_service import ProjectService
from servicedesk.application.services.workflow_service import WorkflowService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["projects"])


@router.post(
    "/projects",
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
    description="""
    Create a project. The creator becomes its lead, and the methodology's
    default workflow and board are created with it.
    """
)
def create_project(
    body: ProjectCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    project = service.create_project(
        organization_id,
        user,
        key=body.key,
        name=body.name,
        description=body.description,
        methodology=body.methodology,
        team_ids=body.team_ids,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    return success(project, "Project created")


@router.get("/projects", summary="List projects visible to the current user")
def list_projects(
    include_archived: bool = False,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    return success(service.list_projects(organization_id, user, include_archived=include_archived))


@router.get("/projects/{project_id}", summary="Get a project")
def get_project(
    project_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    return success(service.get_project(organization_id, user, project_id))


@router.put("/projects/{project_id}", summary="Update a project")
def update_project(
    project_id: str,
    body: ProjectUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    project = service.update_project(
        organization_id,
        user,
        project_id,
        name=body.name,
        description=body.description,
        team_ids=body.team_ids,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    return success(project, "Project updated")


@router.post("/projects/{project_id}/archive", summary="Archive a project")
def archive_project(
    project_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    return success(service.archive_project(organization_id, user, project_id), "Project archived")


@router.delete("/projects/{project_id}", summary="Delete a project with its tasks, sprints and board")
def delete_project(
    project_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    service.delete_project(organization_id, user, project_id)
    return success(message="Project deleted")


@router.post("/projects/{project_id}/members", status_code=status.HTTP_201_CREATED, summary="Add a project member")
def add_member(
    project_id: str,
    body: ProjectMemberRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    project = service.add_member(organization_id, user, project_id, body.user_id, body.role)
    return success(project, "Member added")


@router.put("/projects/{project_id}/members/{member_id}", summary="Change a project member's role")
def update_member_role(
    project_id: str,
    member_id: str,
    body: ProjectMemberRoleRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    project = service.update_member_role(organization_id, user, project_id, member_id, body.role)
    return success(project, "Member role updated")


@router.delete("/projects/{project_id}/members/{member_id}", summary="Remove a project member")
def remove_member(
    project_id: str,
    member_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    project = service.remove_member(organization_id, user, project_id, member_id)
    return success(project, "Member removed")


# Workflow

@router.get("/projects/{project_id}/workflow", summary="Workflow applying to a project")
def get_workflow(
    project_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    return success(service.get_project_workflow(organization_id, user, project_id))


@router.put(
    "/projects/{project_id}/workflow",
    summary="Replace the project's workflow statuses",
    description="Exactly one status must be initial. Board columns follow the new statuses.",
)
def update_workflow(
    project_id: str,
    body: WorkflowUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    workflow = service.update_workflow(
        organization_id,
        user,
        project_id,
        statuses=to_workflow_statuses(body.statuses),
        transitions=to_workflow_transitions(body.transitions),
    )
    return success(workflow, "Workflow updated")


# Board

@router.get("/projects/{project_id}/board", summary="Board with its columns and grouped tasks")
def get_board(
    project_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return success(service.get_board(organization_id, user, project_id))


@router.post("/projects/{project_id}/board/columns", status_code=status.HTTP_201_CREATED, summary="Add a board column")
def add_column(
    project_id: str,
    body: ColumnCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    column = service.add_column(organization_id, user, project_id, body.name, body.status_id, body.wip_limit)
    return success(column, "Column added")


@router.put("/projects/{project_id}/board/columns/reorder", summary="Reorder board columns")
def reorder_columns(
    project_id: str,
    body: ColumnReorderRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    columns = service.reorder_columns(organization_id, user, project_id, body.column_ids)
    return success(columns, "Columns reordered")


@router.put("/projects/{project_id}/board/columns/{column_id}", summary="Rename a column or change its WIP limit")
def update_column(
    project_id: str,
    column_id: str,
    body: ColumnUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    column = service.update_column(organization_id, user, project_id, column_id, body.name, body.wip_limit)
    return success(column, "Column updated")


@router.delete("/projects/{project_id}/board/columns/{column_id}", summary="Delete a board column")
def delete_column(
    project_id: str,
    column_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    columns = service.delete_column(organization_id, user, project_id, column_id)
    return success(columns, "Column deleted")


@router.post(
    "/projects/{project_id}/board/move",
    summary="Move a task onto a board column",
    description="""
    Transitions the task to the column's status and updates its position.
    Sending `sprint_id` (null included) also moves the task between
    sprint and backlog.
    """
)
def move_task(
    project_id: str,
    body: MoveTaskRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    task = service.move_task(
        organization_id,
        user,
        project_id,
        task_id=body.task_id,
        column_id=body.column_id,
        order=body.order,
        sprint_id=body.sprint_id,
        change_sprint="sprint_id" in body.model_fields_set,
    )
    return success(task, "Task moved")
