"""
Move Task Use Case
==================

Drag-and-drop of a task onto a board column.
"""
from typing import Optional

from servicedesk.core.errors import ValidationError
from servicedesk.domain.models.board import Board
from servicedesk.domain.models.task import Task
from servicedesk.domain.models.workflow import Workflow
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.application.use_cases.workflow.transition_task import TransitionTaskUseCase


class MoveTaskUseCase:
    """
    Resolves the target column to a workflow status, transitions the task
    when its status changes and stores its position.
    """

    def __init__(self, task_repository: TaskRepository, transition_task: TransitionTaskUseCase):
        self._tasks = task_repository
        self._transition = transition_task

    def execute(
        self,
        board: Board,
        workflow: Workflow,
        task: Task,
        column_id: str,
        user_id: str,
        order: Optional[int] = None,
        sprint_id: Optional[str] = None,
        change_sprint: bool = False,
    ) -> Task:
        """
        Args:
            board: Board the task is moved on
            workflow: Workflow of the project
            task: Task being moved
            column_id: Target column id, or a column slug such as "in-progress"
            user_id: User moving the task
            order: New position inside the column
            sprint_id: Sprint to put the task in (None for the backlog)
            change_sprint: Whether `sprint_id` should be applied

        Raises:
            ValidationError: If the column does not map to any workflow status
        """
        column = board.find_column(column_id)
        slug = column.key if column is not None else column_id
        status = workflow.resolve_status(slug)
        if status is None:
            raise ValidationError(f"Column '{column_id}' does not map to a workflow status")

        if status.id != task.status.id:
            task = self._transition.execute(task, workflow, status.id, user_id, "Moved on board")

        changed = False
        if order is not None and order != task.column_order:
            task.column_order = order
            changed = True
        if change_sprint and sprint_id != task.sprint_id:
            task.sprint_id = sprint_id
            changed = True
        return self._tasks.update(task) if changed else task
