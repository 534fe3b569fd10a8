"""
Create Project Use Case
=======================

Creates a project together with its workflow and default board.
"""
import logging
from datetime import datetime
from typing import List, Optional

from servicedesk.core.errors import ConflictError, ValidationError
from servicedesk.domain.constants.pm_constants import Methodology, ProjectRole
from servicedesk.domain.models.board import Board, columns_from_workflow
from servicedesk.domain.models.project import Project, ProjectMember
from servicedesk.domain.models.user import User
from servicedesk.domain.models.workflow import Workflow, default_statuses, default_transitions
from servicedesk.domain.repositories.board_repository import BoardRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class CreateProjectUseCase:
    """
    Use case for creating a project.

    The creator becomes the project lead. The project's workflow is copied
    from the organization default for the methodology when one exists,
    otherwise from the built-in methodology default. The board gets one
    column per workflow status.
    """

    def __init__(
        self,
        project_repository: ProjectRepository,
        workflow_repository: WorkflowRepository,
        board_repository: BoardRepository,
    ):
        self._projects = project_repository
        self._workflows = workflow_repository
        self._boards = board_repository

    def execute(
        self,
        organization_id: str,
        creator: User,
        key: str,
        name: str,
        description: Optional[str] = None,
        methodology: str = Methodology.SCRUM,
        team_ids: Optional[List[str]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Project:
        """
        Execute the create project use case.

        Returns:
            Created project entity

        Raises:
            ValidationError: If the key is malformed
            ValidationError: If the methodology or dates are invalid
            ConflictError: If the key is already used in the organization
        """
        normalized_key = Project.normalize_key(key)
        if methodology not in Methodology.ALL:
            raise ValidationError(f"Unknown methodology '{methodology}'")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be after start date")
        if self._projects.find_by_key(organization_id, normalized_key):
            raise ConflictError(f"Project key '{normalized_key}' already exists")

        project = Project(
            id=new_id(),
            organization_id=organization_id,
            key=normalized_key,
            name=name.strip(),
            description=description,
            methodology=methodology,
            lead_id=creator.id,
            members=[ProjectMember(user_id=creator.id, role=ProjectRole.LEAD)],
            team_ids=team_ids or [],
            start_date=start_date,
            end_date=end_date,
            created_by=creator.id,
        )
        project = self._projects.create(project)

        workflow = self._workflows.create(self._workflow_for(project))
        self._boards.create(
            Board(
                id=new_id(),
                organization_id=organization_id,
                project_id=project.id,
                name=f"{project.name} Board",
                columns=columns_from_workflow(workflow),
                created_by=creator.id,
            )
        )

        logger.info("Project created: %s (%s) by %s", project.key, project.id, creator.id)
        return project

    def _workflow_for(self, project: Project) -> Workflow:
        template = self._workflows.find_organization_default(project.organization_id, project.methodology)
        if template is not None:
            statuses = [s.model_copy() for s in template.statuses]
            transitions = [t.model_copy() for t in template.transitions]
        else:
            statuses = default_statuses(project.methodology)
            transitions = default_transitions(project.methodology)
        return Workflow(
            id=new_id(),
            organization_id=project.organization_id,
            project_id=project.id,
            name=f"{project.name} Workflow",
            methodology=project.methodology,
            statuses=statuses,
            transitions=transitions,
        )
