"""
Create Task Use Case
====================

Business use case for adding a work item to a project.
"""
import logging
from datetime import datetime
from typing import List, Optional

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.people_constants import NotificationType
from servicedesk.domain.constants.pm_constants import TaskPriority, TaskType
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.task import Task, TaskStatus, WorkflowHistoryEntry
from servicedesk.domain.models.user import User
from servicedesk.domain.models.workflow import Workflow
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class CreateTaskUseCase:
    """
    Use case for creating a task.

    Task keys are PROJECTKEY-n, numbered by a per-project counter. New
    tasks start in the workflow's initial status.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        sprint_repository: SprintRepository,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
        send_notification: SendNotificationUseCase,
    ):
        self._tasks = task_repository
        self._sprints = sprint_repository
        self._users = user_repository
        self._counters = counter_repository
        self._notify = send_notification

    def execute(
        self,
        project: Project,
        workflow: Workflow,
        reporter: User,
        title: str,
        description: Optional[str] = None,
        type: str = TaskType.TASK,
        priority: str = TaskPriority.MEDIUM,
        assignee_id: Optional[str] = None,
        sprint_id: Optional[str] = None,
        epic_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        story_points: Optional[float] = None,
        estimated_hours: Optional[float] = None,
        due_date: Optional[datetime] = None,
        labels: Optional[List[str]] = None,
    ) -> Task:
        """
        Execute the create task use case.

        Returns:
            Created task entity

        Raises:
            ValidationError: If title, type or priority are invalid, or the
                sprint/epic/parent belongs to another project
            NotFoundError: If a referenced sprint, epic, parent or assignee does not exist
        """
        if not title or not title.strip():
            raise ValidationError("Task title is required")
        if type not in TaskType.ALL:
            raise ValidationError(f"Invalid task type '{type}'")
        if priority not in TaskPriority.ALL:
            raise ValidationError(f"Invalid task priority '{priority}'")

        if sprint_id:
            sprint = self._sprints.find_by_id(sprint_id)
            if sprint is None or sprint.project_id != project.id:
                raise NotFoundError.for_resource("Sprint", sprint_id)
            if sprint.is_completed():
                raise ValidationError("Cannot add tasks to a completed sprint")
        parent = self._project_task(project, parent_id, "Parent task")
        self._project_task(project, epic_id, "Epic")
        if assignee_id:
            assignee = self._users.find_by_id(assignee_id)
            if assignee is None or assignee.organization_id != project.organization_id:
                raise NotFoundError.for_resource("User", assignee_id)

        initial = workflow.initial_status()
        number = self._counters.next_sequence(f"task:{project.id}")
        task = Task(
            id=new_id(),
            organization_id=project.organization_id,
            project_id=project.id,
            key=f"{project.key}-{number}",
            number=number,
            title=title.strip(),
            description=description,
            type=type,
            priority=priority,
            status=TaskStatus.from_workflow_status(initial),
            assignee_id=assignee_id,
            reporter_id=reporter.id,
            sprint_id=sprint_id,
            epic_id=epic_id,
            parent_id=parent_id,
            story_points=story_points,
            estimated_hours=estimated_hours,
            due_date=due_date,
            labels=labels or [],
            watchers=[w for w in dict.fromkeys([reporter.id, assignee_id]) if w],
            workflow_history=[
                WorkflowHistoryEntry(to_status=initial.id, changed_by=reporter.id, comment="Task created")
            ],
            backlog_order=number,
        )
        created = self._tasks.create(task)

        if parent is not None:
            parent.subtasks.append(created.id)
            self._tasks.update(parent)

        if assignee_id and assignee_id != reporter.id:
            self._notify.execute(
                user_id=assignee_id,
                type=NotificationType.TASK_ASSIGNED,
                title="Task assigned",
                message=f"{reporter.name} assigned you {created.key}: {created.title}",
                organization_id=project.organization_id,
                entity_type="task",
                entity_id=created.id,
            )

        logger.info("Task created: %s (%s) in project %s", created.key, created.id, project.key)
        return created

    def _project_task(self, project: Project, task_id: Optional[str], label: str) -> Optional[Task]:
        if not task_id:
            return None
        task = self._tasks.find_by_id(task_id)
        if task is None or task.project_id != project.id:
            raise NotFoundError.for_resource(label, task_id)
        return task
