"""
Sprint Service
==============

Application service that coordinates sprint planning and execution.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.pm_constants import ProjectPermission
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.sprint import Sprint, SprintCapacity, TeamMemberCapacity
from servicedesk.domain.models.task import Task
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.services import sprint_metrics
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.application.use_cases.project.authorize_project import AuthorizeProjectUseCase
from servicedesk.application.use_cases.sprint.complete_sprint import CompleteSprintUseCase
from servicedesk.application.use_cases.sprint.start_sprint import StartSprintUseCase
from servicedesk.utils.datetime_utils import ensure_aware
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class SprintService:
    """
    Application service for sprint operations.

    Reading sprints needs project view access; every change needs the
    manage_sprints permission.
    """

    def __init__(
        self,
        sprint_repository: SprintRepository,
        project_repository: ProjectRepository,
        task_repository: TaskRepository,
        counter_repository: CounterRepository,
        notification_repository: NotificationRepository,
    ):
        """
        Initialize service with repositories.

        Args:
            sprint_repository: Repository for sprint persistence
            project_repository: Repository for project lookups and permissions
            task_repository: Repository for sprint tasks
            counter_repository: Repository providing per-project sprint numbers
            notification_repository: Repository for member notifications
        """
        self._sprints = sprint_repository
        self._tasks = task_repository
        self._counters = counter_repository
        self._authorize = AuthorizeProjectUseCase(project_repository)
        notify = SendNotificationUseCase(notification_repository)
        self._start_use_case = StartSprintUseCase(sprint_repository, task_repository, notify)
        self._complete_use_case = CompleteSprintUseCase(sprint_repository, task_repository, notify)

    def create_sprint(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        start_date: datetime,
        end_date: datetime,
        name: Optional[str] = None,
        goal: Optional[str] = None,
        capacity_planned: Optional[float] = None,
        capacity_available: Optional[float] = None,
    ) -> Sprint:
        """
        Create a sprint in planning.

        Returns:
            Created sprint, numbered after the project's previous sprints

        Raises:
            ValidationError: If the end date is not after the start date
        """
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.MANAGE_SPRINTS)
        self._check_dates(start_date, end_date)

        number = self._counters.next_sequence(f"sprint:{project.id}")
        sprint = Sprint(
            id=new_id(),
            organization_id=organization_id,
            project_id=project.id,
            number=number,
            name=(name or "").strip() or f"Sprint {number}",
            goal=goal,
            start_date=start_date,
            end_date=end_date,
            capacity=SprintCapacity(
                planned=capacity_planned or 0,
                available=capacity_available or 0,
            ),
            created_by=user.id,
        )
        sprint.record("sprint_created", user.id, f"{sprint.name} created")
        created = self._sprints.create(sprint)
        logger.info("Sprint created: %s (%s) in project %s", created.name, created.id, project.key)
        return created

    def list_sprints(self, organization_id: str, user: User, project_id: str) -> List[Dict[str, Any]]:
        """Sprints of a project, each with task and point stats."""
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.VIEW_PROJECT)
        return [
            {**sprint.model_dump(), "stats": sprint_metrics.sprint_stats(self._tasks.find_by_sprint(sprint.id))}
            for sprint in self._sprints.find_by_project(project.id)
        ]

    def get_sprint(self, organization_id: str, user: User, sprint_id: str) -> Sprint:
        sprint, _ = self._load(organization_id, user, sprint_id, ProjectPermission.VIEW_PROJECT)
        return sprint

    def get_sprint_tasks(self, organization_id: str, user: User, sprint_id: str) -> List[Task]:
        sprint, _ = self._load(organization_id, user, sprint_id, ProjectPermission.VIEW_TASKS)
        return self._tasks.find_by_sprint(sprint.id)

    def update_sprint(
        self,
        organization_id: str,
        user: User,
        sprint_id: str,
        name: Optional[str] = None,
        goal: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        capacity_planned: Optional[float] = None,
        capacity_available: Optional[float] = None,
    ) -> Sprint:
        sprint, _ = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        if sprint.is_completed():
            raise ValidationError("Completed sprints cannot be updated")

        if name is not None:
            sprint.name = name.strip() or sprint.name
        if goal is not None:
            sprint.goal = goal
        if start_date is not None:
            sprint.start_date = start_date
        if end_date is not None:
            sprint.end_date = end_date
        if capacity_planned is not None:
            sprint.capacity.planned = capacity_planned
        if capacity_available is not None:
            sprint.capacity.available = capacity_available
        self._check_dates(sprint.start_date, sprint.end_date)
        return self._sprints.update(sprint)

    def delete_sprint(self, organization_id: str, user: User, sprint_id: str) -> None:
        """Delete a sprint; its tasks return to the backlog."""
        sprint, _ = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        if sprint.is_active():
            raise ValidationError("Cannot delete an active sprint")
        released = self._tasks.clear_sprint(sprint.id)
        self._sprints.delete(sprint.id)
        logger.info("Sprint deleted: %s (%s), %d task(s) moved to backlog", sprint.name, sprint.id, released)

    def start_sprint(
        self,
        organization_id: str,
        user: User,
        sprint_id: str,
        skip_validation: bool = False,
        over_capacity_justification: Optional[str] = None,
        participants: Optional[List[str]] = None,
    ) -> Sprint:
        sprint, project = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        return self._start_use_case.execute(
            sprint, project, user, skip_validation, over_capacity_justification, participants
        )

    def complete_sprint(
        self,
        organization_id: str,
        user: User,
        sprint_id: str,
        move_to_sprint_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        sprint, project = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        return self._complete_use_case.execute(sprint, project, user, move_to_sprint_id)

    def update_team_capacity(
        self,
        organization_id: str,
        user: User,
        sprint_id: str,
        team_capacity: List[TeamMemberCapacity],
    ) -> Dict[str, Any]:
        """
        Replace the per-member capacity of a planning sprint.

        The sprint's available capacity becomes the summed member hours.

        Returns:
            Dict with the updated sprint and its capacity summary
        """
        sprint, _ = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        if not sprint.is_planning():
            raise ValidationError("Team capacity can only be updated during planning")

        summary = sprint_metrics.capacity_summary(team_capacity)
        sprint.team_capacity = list(team_capacity)
        sprint.capacity.available = summary["available_hours"]
        sprint.record(
            "capacity_updated",
            user.id,
            f"Team capacity set to {summary['available_hours']:g} hours for {summary['total_members']} member(s)",
        )
        return {"sprint": self._sprints.update(sprint), "capacity_summary": summary}

    def planning_summary(self, organization_id: str, user: User, sprint_id: str) -> Dict[str, Any]:
        sprint, project = self._load(organization_id, user, sprint_id, ProjectPermission.VIEW_PROJECT)
        tasks = self._tasks.find_by_sprint(sprint.id)
        previous = self._sprints.find_completed(project.id, 1)
        previous_velocity = previous[0].velocity.completed if previous and previous[0].velocity else None
        return sprint_metrics.planning_summary(sprint, tasks, previous_velocity)

    def insights(self, organization_id: str, user: User, sprint_id: str) -> Dict[str, Any]:
        sprint, _ = self._load(organization_id, user, sprint_id, ProjectPermission.VIEW_PROJECT)
        return sprint_metrics.sprint_insights(sprint, self._tasks.find_by_sprint(sprint.id))

    def backlog(self, organization_id: str, user: User, project_id: str) -> List[Task]:
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.VIEW_TASKS)
        return self._tasks.find_backlog(project.id)

    def update_settings(
        self,
        organization_id: str,
        user: User,
        sprint_id: str,
        require_goal: Optional[bool] = None,
        require_estimates: Optional[bool] = None,
        enforce_capacity: Optional[bool] = None,
    ) -> Sprint:
        sprint, _ = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        if require_goal is not None:
            sprint.settings.require_goal = require_goal
        if require_estimates is not None:
            sprint.settings.require_estimates = require_estimates
        if enforce_capacity is not None:
            sprint.settings.enforce_capacity = enforce_capacity
        return self._sprints.update(sprint)

    def add_tasks(self, organization_id: str, user: User, sprint_id: str, task_ids: List[str]) -> int:
        """Pull backlog tasks of the same project into a sprint."""
        sprint, project = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        if sprint.is_completed():
            raise ValidationError("Cannot add tasks to a completed sprint")
        self._project_tasks(project, task_ids)
        return self._tasks.move_to_sprint(task_ids, sprint.id)

    def remove_tasks(self, organization_id: str, user: User, sprint_id: str, task_ids: List[str]) -> int:
        sprint, project = self._load(organization_id, user, sprint_id, ProjectPermission.MANAGE_SPRINTS)
        tasks = self._project_tasks(project, task_ids)
        stray = [t.key for t in tasks if t.sprint_id != sprint.id]
        if stray:
            raise ValidationError(f"Tasks not in this sprint: {', '.join(stray)}")
        return self._tasks.move_to_sprint(task_ids, None)

    def _project_tasks(self, project: Project, task_ids: List[str]) -> List[Task]:
        tasks = []
        for task_id in task_ids:
            task = self._tasks.find_by_id(task_id)
            if task is None or task.project_id != project.id:
                raise NotFoundError.for_resource("Task", task_id)
            tasks.append(task)
        return tasks

    def _load(self, organization_id: str, user: User, sprint_id: str, permission: str) -> Tuple[Sprint, Project]:
        sprint = self._sprints.find_by_id(sprint_id)
        if sprint is None or sprint.organization_id != organization_id:
            raise NotFoundError.for_resource("Sprint", sprint_id)
        project = self._authorize.execute(organization_id, sprint.project_id, user, permission)
        return sprint, project

    @staticmethod
    def _check_dates(start_date: datetime, end_date: datetime) -> None:
        if ensure_aware(end_date) <= ensure_aware(start_date):
            raise ValidationError("End date must be after start date")
