"""
Board Service
=============

Project boards: columns, grouped tasks and drag-and-drop moves.
"""
import logging
from typing import Any, Dict, List, Optional

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.pm_constants import ProjectPermission
from servicedesk.domain.models.board import Board, BoardColumn, columns_from_workflow
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.task import Task
from servicedesk.domain.models.user import User
from servicedesk.domain.models.workflow import Workflow
from servicedesk.domain.repositories.board_repository import BoardRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.domain.services.board_layout import enrich_columns, group_tasks
from servicedesk.application.use_cases.board.move_task import MoveTaskUseCase
from servicedesk.application.use_cases.project.authorize_project import AuthorizeProjectUseCase
from servicedesk.application.use_cases.workflow.resolve_workflow import ResolveWorkflowUseCase
from servicedesk.application.use_cases.workflow.transition_task import TransitionTaskUseCase
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class BoardService:
    """Application service for board operations."""

    def __init__(
        self,
        board_repository: BoardRepository,
        project_repository: ProjectRepository,
        workflow_repository: WorkflowRepository,
        task_repository: TaskRepository,
        sprint_repository: SprintRepository,
    ):
        self._boards = board_repository
        self._tasks = task_repository
        self._sprints = sprint_repository
        self._authorize = AuthorizeProjectUseCase(project_repository)
        self._resolve_workflow = ResolveWorkflowUseCase(workflow_repository)
        self._move_use_case = MoveTaskUseCase(task_repository, TransitionTaskUseCase(task_repository))

    def get_board(self, organization_id: str, user: User, project_id: str) -> Dict[str, Any]:
        """
        Full board of a project.

        Shows the active sprint's tasks when a sprint is running, otherwise
        every task of the project.

        Returns:
            Dict with the board, enriched columns, tasks grouped by column
            key and the active sprint (or None)
        """
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.VIEW_TASKS)
        workflow = self._resolve_workflow.execute(project)
        board = self._board_for(project, workflow, user)

        active = self._sprints.find_active(project.id)
        tasks = self._tasks.find_by_sprint(active.id) if active else self._tasks.find_by_project(project.id)
        return {
            "board": board,
            "columns": enrich_columns(board.columns, workflow),
            "tasks_by_status": group_tasks(board.columns, tasks, workflow),
            "active_sprint": active,
        }

    def add_column(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        name: str,
        status_id: Optional[str] = None,
        wip_limit: int = 0,
    ) -> BoardColumn:
        project, workflow, board = self._manage(organization_id, user, project_id)
        if status_id and workflow.find_status(status_id) is None:
            raise ValidationError(f"Status '{status_id}' does not exist in the workflow")
        column = board.add_column(name, status_id, wip_limit)
        self._boards.update(board)
        logger.info("Board column added to %s: %s", project.key, column.id)
        return column

    def update_column(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        column_id: str,
        name: Optional[str] = None,
        wip_limit: Optional[int] = None,
    ) -> BoardColumn:
        _, _, board = self._manage(organization_id, user, project_id)
        column = board.update_column(column_id, name, wip_limit)
        self._boards.update(board)
        return column

    def delete_column(self, organization_id: str, user: User, project_id: str, column_id: str) -> List[BoardColumn]:
        _, _, board = self._manage(organization_id, user, project_id)
        board.delete_column(column_id)
        return self._boards.update(board).sorted_columns()

    def reorder_columns(self, organization_id: str, user: User, project_id: str, column_ids: List[str]) -> List[BoardColumn]:
        _, _, board = self._manage(organization_id, user, project_id)
        board.reorder_columns(column_ids)
        return self._boards.update(board).sorted_columns()

    def move_task(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        task_id: str,
        column_id: str,
        order: Optional[int] = None,
        sprint_id: Optional[str] = None,
        change_sprint: bool = False,
    ) -> Task:
        """
        Move a task onto a column.

        `change_sprint` tells an explicit null `sprint_id` (move to the
        backlog) apart from an omitted one.
        """
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.TRANSITION_TASK)
        task = self._tasks.find_by_id(task_id)
        if task is None or task.project_id != project.id:
            raise NotFoundError.for_resource("Task", task_id)
        if change_sprint and sprint_id:
            sprint = self._sprints.find_by_id(sprint_id)
            if sprint is None or sprint.project_id != project.id:
                raise NotFoundError.for_resource("Sprint", sprint_id)
            if sprint.is_completed():
                raise ValidationError("Cannot move tasks into a completed sprint")

        workflow = self._resolve_workflow.execute(project)
        board = self._board_for(project, workflow, user)
        return self._move_use_case.execute(
            board, workflow, task, column_id, user.id, order, sprint_id, change_sprint
        )

    def _manage(self, organization_id: str, user: User, project_id: str):
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.MANAGE_BOARD)
        workflow = self._resolve_workflow.execute(project)
        return project, workflow, self._board_for(project, workflow, user)

    def _board_for(self, project: Project, workflow: Workflow, user: User) -> Board:
        """The project's board, created from the workflow on first use."""
        board = self._boards.find_by_project(project.id)
        if board is not None:
            return board
        board = Board(
            id=new_id(),
            organization_id=project.organization_id,
            project_id=project.id,
            columns=columns_from_workflow(workflow),
            created_by=user.id,
        )
        return self._boards.create(board)
