"""
Start Sprint Use Case
=====================

Business use case for activating a sprint.
"""
import logging
from typing import List, Optional

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


class StartSprintUseCase:
    """
    Use case for starting a sprint.

    Enforces one active sprint per project and, unless validation is
    skipped, the checks enabled in the sprint settings.
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
        skip_validation: bool = False,
        over_capacity_justification: Optional[str] = None,
        participants: Optional[List[str]] = None,
    ) -> Sprint:
        """
        Execute the start sprint use case.

        Args:
            sprint: Sprint to start
            project: Project the sprint belongs to
            user: User starting the sprint
            skip_validation: Bypass goal/estimate/capacity checks
            over_capacity_justification: Required when skipping validation
                on an over-committed sprint
            participants: Users who took part in the commitment

        Returns:
            Started sprint

        Raises:
            ValidationError: If the sprint is not in planning, another sprint
                is active or a start check fails
        """
        if not sprint.is_planning():
            raise ValidationError("Only sprints in planning can be started")
        active = self._sprints.find_active(project.id)
        if active is not None and active.id != sprint.id:
            raise ValidationError(f"Project already has an active sprint: {active.name}")

        tasks = self._tasks.find_by_sprint(sprint.id)
        committed = sprint_metrics.total_points(tasks)
        available = sprint.capacity.available
        over_capacity = sprint_metrics.is_over_capacity(committed, available)

        if not skip_validation:
            errors = sprint_metrics.start_validation_errors(sprint, tasks)
            if errors:
                raise ValidationError(
                    f"Sprint cannot be started: {'; '.join(errors)}",
                    errors=[{"message": error} for error in errors],
                )
        elif over_capacity and not (over_capacity_justification or "").strip():
            raise ValidationError("A justification is required to start a sprint over capacity")

        utilization = sprint_metrics.utilization(committed, available)
        sprint.start(
            user_id=user.id,
            committed_points=committed,
            task_count=len(tasks),
            utilization=utilization,
            over_capacity=over_capacity,
            justification=over_capacity_justification,
            participants=participants,
        )
        started = self._sprints.update(sprint)

        self._notify.execute_many(
            project.member_ids(),
            exclude=user.id,
            type=NotificationType.SPRINT_STARTED,
            title="Sprint started",
            message=f"{started.name} has started in {project.name}",
            organization_id=project.organization_id,
            entity_type="sprint",
            entity_id=started.id,
        )
        logger.info(
            "Sprint started: %s (%s) with %s points (%s%% capacity)",
            started.name, started.id, committed, utilization,
        )
        return started
