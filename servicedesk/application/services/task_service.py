"""
Task Service
============

Application service for project tasks.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import AuthorizationError, NotFoundError, ValidationError
from servicedesk.domain.constants.people_constants import NotificationType
from servicedesk.domain.constants.pm_constants import ProjectPermission, TaskPriority, TaskType
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.task import Task, TaskComment
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.base_repository import IS_NULL
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.application.use_cases.project.authorize_project import AuthorizeProjectUseCase
from servicedesk.application.use_cases.task.create_task import CreateTaskUseCase
from servicedesk.application.use_cases.workflow.resolve_workflow import ResolveWorkflowUseCase

logger = logging.getLogger(__name__)

# Fields a task update may change
UPDATABLE_FIELDS = (
    "title", "description", "type", "priority", "epic_id", "story_points",
    "estimated_hours", "due_date", "labels", "backlog_order",
)


class TaskService:
    """
    Application service for task operations.

    Contributors may edit the tasks they reported or are assigned to;
    managers and leads may edit any task.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        project_repository: ProjectRepository,
        workflow_repository: WorkflowRepository,
        sprint_repository: SprintRepository,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
        notification_repository: NotificationRepository,
    ):
        self._tasks = task_repository
        self._users = user_repository
        self._authorize = AuthorizeProjectUseCase(project_repository)
        self._resolve_workflow = ResolveWorkflowUseCase(workflow_repository)
        self._notify = SendNotificationUseCase(notification_repository)
        self._create_use_case = CreateTaskUseCase(
            task_repository, sprint_repository, user_repository, counter_repository, self._notify
        )

    def create_task(self, organization_id: str, user: User, project_id: str, **fields: Any) -> Task:
        """
        Create a task in a project.

        Args:
            organization_id: Tenant identifier
            user: Reporter of the task
            project_id: Project receiving the task
            **fields: Task fields accepted by CreateTaskUseCase

        Returns:
            Created task entity
        """
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.CREATE_TASK)
        workflow = self._resolve_workflow.execute(project)
        return self._create_use_case.execute(project=project, workflow=workflow, reporter=user, **fields)

    def list_tasks(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        status: Optional[str] = None,
        type: Optional[str] = None,
        assignee_id: Optional[str] = None,
        sprint_id: Optional[str] = None,
        epic_id: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Task], int]:
        """List project tasks. `sprint_id="none"` selects the backlog."""
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.VIEW_TASKS)
        filters = {
            "project_id": project.id,
            "status.id": status,
            "type": type,
            "assignee_id": assignee_id,
            "sprint_id": IS_NULL if sprint_id == "none" else sprint_id,
            "epic_id": epic_id,
            "priority": priority,
        }
        return self._tasks.find_page(organization_id, filters, page, limit, search)

    def get_task(self, organization_id: str, user: User, task_id: str) -> Task:
        task, _ = self._load(organization_id, user, task_id, ProjectPermission.VIEW_TASKS)
        return task

    def update_task(self, organization_id: str, user: User, task_id: str, changes: Dict[str, Any]) -> Task:
        """
        Apply a partial update.

        Raises:
            AuthorizationError: If the user may not edit this task
            ValidationError: If a field value is invalid
        """
        task, project = self._load(organization_id, user, task_id, ProjectPermission.VIEW_TASKS)
        self._ensure_can_edit(task, project, user)

        if "type" in changes and changes["type"] not in TaskType.ALL:
            raise ValidationError(f"Invalid task type '{changes['type']}'")
        if "priority" in changes and changes["priority"] not in TaskPriority.ALL:
            raise ValidationError(f"Invalid task priority '{changes['priority']}'")
        if changes.get("epic_id"):
            epic = self._tasks.find_by_id(changes["epic_id"])
            if epic is None or epic.project_id != project.id:
                raise NotFoundError.for_resource("Epic", changes["epic_id"])
        if "title" in changes:
            if not (changes["title"] or "").strip():
                raise ValidationError("Task title is required")
            changes["title"] = changes["title"].strip()

        for field in UPDATABLE_FIELDS:
            if field in changes:
                setattr(task, field, changes[field])
        return self._tasks.update(task)

    def delete_task(self, organization_id: str, user: User, task_id: str) -> None:
        task, _ = self._load(organization_id, user, task_id, ProjectPermission.DELETE_TASK)
        if task.parent_id:
            self._tasks.remove_subtask(task.parent_id, task.id)
        self._tasks.delete(task.id)
        logger.info("Task deleted: %s (%s)", task.key, task.id)

    def assign_task(self, organization_id: str, user: User, task_id: str, assignee_id: Optional[str]) -> Task:
        """Assign or unassign a task; the new assignee is notified."""
        task, project = self._load(organization_id, user, task_id, ProjectPermission.VIEW_TASKS)
        self._ensure_can_edit(task, project, user)
        if assignee_id:
            assignee = self._users.find_by_id(assignee_id)
            if assignee is None or assignee.organization_id != organization_id:
                raise NotFoundError.for_resource("User", assignee_id)

        if not task.assign(assignee_id):
            return task
        updated = self._tasks.update(task)
        if assignee_id and assignee_id != user.id:
            self._notify.execute(
                user_id=assignee_id,
                type=NotificationType.TASK_ASSIGNED,
                title="Task assigned",
                message=f"{user.name} assigned you {updated.key}: {updated.title}",
                organization_id=organization_id,
                entity_type="task",
                entity_id=updated.id,
            )
        return updated

    def add_comment(self, organization_id: str, user: User, task_id: str, content: str) -> TaskComment:
        task, _ = self._load(organization_id, user, task_id, ProjectPermission.VIEW_TASKS)
        comment = task.add_comment(user.id, content)
        task.watch(user.id)
        self._tasks.update(task)
        return comment

    def watch(self, organization_id: str, user: User, task_id: str) -> Task:
        task, _ = self._load(organization_id, user, task_id, ProjectPermission.VIEW_TASKS)
        task.watch(user.id)
        return self._tasks.update(task)

    def unwatch(self, organization_id: str, user: User, task_id: str) -> Task:
        task, _ = self._load(organization_id, user, task_id, ProjectPermission.VIEW_TASKS)
        task.unwatch(user.id)
        return self._tasks.update(task)

    def _load(self, organization_id: str, user: User, task_id: str, permission: str) -> Tuple[Task, Project]:
        task = self._tasks.find_in_organization(organization_id, task_id)
        if task is None:
            raise NotFoundError.for_resource("Task", task_id)
        project = self._authorize.execute(organization_id, task.project_id, user, permission)
        return task, project

    @staticmethod
    def _ensure_can_edit(task: Task, project: Project, user: User) -> None:
        is_admin = user.is_admin()
        if project.has_permission(user.id, ProjectPermission.UPDATE_ANY_TASK, is_admin):
            return
        owns = user.id in (task.assignee_id, task.reporter_id)
        if owns and project.has_permission(user.id, ProjectPermission.UPDATE_OWN_TASK, is_admin):
            return
        raise AuthorizationError("You can only update your own tasks")
