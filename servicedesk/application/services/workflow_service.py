"""
Workflow Service
================

Project workflows: reading, editing and moving tasks through them.
"""
import logging
from typing import List, Optional

from servicedesk.core.errors import NotFoundError
from servicedesk.domain.constants.pm_constants import ProjectPermission
from servicedesk.domain.models.board import Board, columns_from_workflow
from servicedesk.domain.models.task import Task
from servicedesk.domain.models.user import User
from servicedesk.domain.models.workflow import Workflow, WorkflowStatus, WorkflowTransition
from servicedesk.domain.repositories.board_repository import BoardRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.application.use_cases.project.authorize_project import AuthorizeProjectUseCase
from servicedesk.application.use_cases.workflow.resolve_workflow import ResolveWorkflowUseCase
from servicedesk.application.use_cases.workflow.transition_task import TransitionTaskUseCase
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class WorkflowService:
    """Application service for workflow operations."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        workflow_repository: WorkflowRepository,
        board_repository: BoardRepository,
        task_repository: TaskRepository,
    ):
        self._workflows = workflow_repository
        self._boards = board_repository
        self._tasks = task_repository
        self._authorize = AuthorizeProjectUseCase(project_repository)
        self._resolve = ResolveWorkflowUseCase(workflow_repository)
        self._transition = TransitionTaskUseCase(task_repository)

    def get_project_workflow(self, organization_id: str, user: User, project_id: str) -> Workflow:
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.VIEW_PROJECT)
        return self._resolve.execute(project)

    def update_workflow(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        statuses: List[WorkflowStatus],
        transitions: Optional[List[WorkflowTransition]] = None,
    ) -> Workflow:
        """
        Replace the statuses (and optionally transitions) of a project's workflow.

        A project still using a shared default gets its own copy. The board
        columns follow the new statuses.

        Raises:
            ValidationError: Unless there is at least one status and exactly one initial status
        """
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.MANAGE_WORKFLOW)
        workflow = self._resolve.execute(project)
        owned = workflow.project_id == project.id and self._workflows.find_by_id(workflow.id) is not None

        if not owned:
            workflow = Workflow(
                id=new_id(),
                organization_id=organization_id,
                project_id=project.id,
                name=f"{project.name} Workflow",
                methodology=project.methodology,
                statuses=workflow.statuses,
                transitions=workflow.transitions,
            )
        workflow.replace_statuses(statuses, transitions)
        saved = self._workflows.update(workflow) if owned else self._workflows.create(workflow)

        board = self._boards.find_by_project(project.id)
        if board is None:
            self._boards.create(
                Board(
                    id=new_id(),
                    organization_id=organization_id,
                    project_id=project.id,
                    columns=columns_from_workflow(saved),
                    created_by=user.id,
                )
            )
        elif board.sync_with_workflow(saved):
            self._boards.update(board)

        logger.info("Workflow updated for project %s: %d statuses", project.key, len(saved.statuses))
        return saved

    def available_transitions(self, organization_id: str, user: User, task_id: str) -> List[WorkflowStatus]:
        task = self._get_task(organization_id, task_id)
        project = self._authorize.execute(organization_id, task.project_id, user, ProjectPermission.VIEW_TASKS)
        return self._resolve.execute(project).available_transitions(task.status.id)

    def transition_task(
        self,
        organization_id: str,
        user: User,
        task_id: str,
        status_id: str,
        comment: Optional[str] = None,
    ) -> Task:
        task = self._get_task(organization_id, task_id)
        project = self._authorize.execute(organization_id, task.project_id, user, ProjectPermission.TRANSITION_TASK)
        return self._transition.execute(task, self._resolve.execute(project), status_id, user.id, comment)

    def _get_task(self, organization_id: str, task_id: str) -> Task:
        task = self._tasks.find_in_organization(organization_id, task_id)
        if task is None:
            raise NotFoundError.for_resource("Task", task_id)
        return task
