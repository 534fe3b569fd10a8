"""
Task Controller
===============

Tasks of a project: CRUD, workflow transitions, assignment, comments and
watchers.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import (
    get_current_user,
    get_organization_id,
    get_task_service,
    get_workflow_service,
)
from servicedesk.application.dto.common_dto import CommentRequest
from servicedesk.application.dto.project_dto import TransitionTaskRequest
from servicedesk.application.dto.task_dto import TaskAssignRequest, TaskCreateRequest, TaskUpdateRequest
from servicedesk.application.services.task_service import TaskService
from servicedesk.application.services.workflow_service import WorkflowService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["tasks"])


@router.post("/projects/{project_id}/tasks", status_code=status.HTTP_201_CREATED, summary="Create a task")
def create_task(
    project_id: str,
    body: TaskCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    task = service.create_task(organization_id, user, project_id, **body.model_dump())
    return success(task, "Task created")


@router.get(
    "/projects/{project_id}/tasks",
    summary="List a project's tasks",
    description="`sprint_id=none` lists the backlog. `search` matches title or key.",
)
def list_tasks(
    project_id: str,
    status_filter: Optional[str] = Query(None, alias="status"),
    type: Optional[str] = None,
    assignee_id: Optional[str] = None,
    sprint_id: Optional[str] = None,
    epic_id: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    tasks, total = service.list_tasks(
        organization_id,
        user,
        project_id,
        status=status_filter,
        type=type,
        assignee_id=assignee_id,
        sprint_id=sprint_id,
        epic_id=epic_id,
        priority=priority,
        search=search,
        page=page,
        limit=limit,
    )
    return paginated(tasks, page, limit, total)


@router.get("/tasks/{task_id}", summary="Get a task")
def get_task(
    task_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return success(service.get_task(organization_id, user, task_id))


@router.api_route("/tasks/{task_id}", methods=["PUT", "PATCH"], summary="Update a task")
def update_task(
    task_id: str,
    body: TaskUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    task = service.update_task(organization_id, user, task_id, body.model_dump(exclude_unset=True))
    return success(task, "Task updated")


@router.delete("/tasks/{task_id}", summary="Delete a task")
def delete_task(
    task_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    service.delete_task(organization_id, user, task_id)
    return success(message="Task deleted")


@router.get("/tasks/{task_id}/transitions", summary="Statuses the task can move to")
def available_transitions(
    task_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    return success(service.available_transitions(organization_id, user, task_id))


@router.post("/tasks/{task_id}/transition", summary="Move a task to another workflow status")
def transition_task(
    task_id: str,
    body: TransitionTaskRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    task = service.transition_task(organization_id, user, task_id, body.status_id, body.comment)
    return success(task, "Task transitioned")


@router.post("/tasks/{task_id}/assign", summary="Assign or unassign a task")
def assign_task(
    task_id: str,
    body: TaskAssignRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    task = service.assign_task(organization_id, user, task_id, body.assignee_id)
    return success(task, "Task assigned" if body.assignee_id else "Task unassigned")


@router.post("/tasks/{task_id}/comments", status_code=status.HTTP_201_CREATED, summary="Comment on a task")
def add_comment(
    task_id: str,
    body: CommentRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return success(service.add_comment(organization_id, user, task_id, body.content), "Comment added")


@router.post("/tasks/{task_id}/watchers", summary="Watch a task")
def watch_task(
    task_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return success(service.watch(organization_id, user, task_id), "Watching task")


@router.delete("/tasks/{task_id}/watchers", summary="Stop watching a task")
def unwatch_task(
    task_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return success(service.unwatch(organization_id, user, task_id), "Stopped watching task")
