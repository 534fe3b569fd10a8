"""
Complete Sprint Use Case
========================

Closes an active sprint, records velocity and carries unfinished work over.
"""
import logging
from typing import Any, Dict, Optional

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.people_constants import NotificationType
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.sprint import Sprint
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.services import sprint_metrics
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase

logger = logging.getLogger(__name__)


class CompleteSprintUseCase:
    """
    Use case for completing a sprint.

    Completed points count tasks in a done-category status. Incomplete
    tasks go to the backlog, or to a planning sprint of the same project.
    Velocity average is rolled over the last three completed sprints.
    """

    def __init__(
        self,
        sprint_repository: SprintRepository,
        task_repository: TaskRepository,
        send_notification: SendNotificationUseCase,
    ):
        self._sprints = sprint_repository
        self._tasks = task_repository
        self._notify = send_notification

    def execute(
        self,
        sprint: Sprint,
        project: Project,
        user: User,
        move_to_sprint_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Execute the complete sprint use case.

        Returns:
            Dict with the completed sprint, completed points, number of
            incomplete tasks and where they were moved

        Raises:
            ValidationError: If the sprint is not active or the target
                sprint is not a planning sprint of the same project
        """
        if not sprint.is_active():
            raise ValidationError("Only active sprints can be completed")

        target = None
        if move_to_sprint_id:
            target = self._sprints.find_by_id(move_to_sprint_id)
            if target is None or target.project_id != project.id or not target.is_planning():
                raise ValidationError("Incomplete tasks can only move to a planning sprint of the same project")

        tasks = self._tasks.find_by_sprint(sprint.id)
        completed = sprint_metrics.completed_points(tasks)
        incomplete = [t.id for t in tasks if not t.is_done()]
        if incomplete:
            self._tasks.move_to_sprint(incomplete, target.id if target else None)

        previous = [
            s.velocity.completed
            for s in self._sprints.find_completed(project.id, sprint_metrics.VELOCITY_WINDOW - 1)
            if s.velocity is not None
        ]
        average = sprint_metrics.rolling_average([completed] + previous)

        sprint.complete(user.id, completed, average)
        completed_sprint = self._sprints.update(sprint)

        self._notify.execute_many(
            project.member_ids(),
            exclude=user.id,
            type=NotificationType.SPRINT_COMPLETED,
            title="Sprint completed",
            message=f"{completed_sprint.name} completed with {completed:g} points done",
            organization_id=project.organization_id,
            entity_type="sprint",
            entity_id=completed_sprint.id,
        )
        logger.info(
            "Sprint completed: %s (%s), %s points done, %d task(s) moved to %s",
            completed_sprint.name, completed_sprint.id, completed, len(incomplete),
            target.name if target else "backlog",
        )
        return {
            "sprint": completed_sprint,
            "completed_points": completed,
            "incomplete_tasks": len(incomplete),
            "moved_to": target.id if target else "backlog",
        }
