"""
Transition Task Use Case
========================
"""
import logging
from typing import Optional

from servicedesk.core.errors import ValidationError
from servicedesk.domain.models.task import Task
from servicedesk.domain.models.workflow import Workflow
from servicedesk.domain.repositories.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class TransitionTaskUseCase:
    """
    Moves a task to another status of its project's workflow.

    Any status of the workflow may be targeted; the move is recorded in the
    task's workflow history.
    """

    def __init__(self, task_repository: TaskRepository):
        self._tasks = task_repository

    def execute(
        self,
        task: Task,
        workflow: Workflow,
        status_id: str,
        user_id: str,
        comment: Optional[str] = None,
    ) -> Task:
        """
        Args:
            task: Task to move
            workflow: Workflow of the task's project
            status_id: Target status id
            user_id: User making the change
            comment: Optional note stored in the history entry

        Returns:
            Updated task

        Raises:
            ValidationError: If the status is not part of the workflow
        """
        status = workflow.find_status(status_id)
        if status is None:
            raise ValidationError(f"Status '{status_id}' does not exist in the workflow")

        previous = task.status.id
        task.transition_to(status, user_id, comment)
        updated = self._tasks.update(task)
        logger.info("Task %s moved from %s to %s by %s", task.key, previous, status.id, user_id)
        return updated
