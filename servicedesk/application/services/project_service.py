"""
Project Service
===============

Application service that coordinates project-related operations.
"""
import logging
from datetime import datetime
from typing import List, Optional

from servicedesk.core.errors import ConflictError, NotFoundError, ValidationError
from servicedesk.domain.constants.pm_constants import Methodology, ProjectPermission, ProjectRole
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.board_repository import BoardRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.application.use_cases.project.authorize_project import AuthorizeProjectUseCase
from servicedesk.application.use_cases.project.create_project import CreateProjectUseCase

logger = logging.getLogger(__name__)


class ProjectService:
    """
    Application service for project operations.

    This service coordinates the project use cases and membership changes.
    """

    def __init__(
        self,
        project_repository: ProjectRepository,
        workflow_repository: WorkflowRepository,
        board_repository: BoardRepository,
        sprint_repository: SprintRepository,
        task_repository: TaskRepository,
        user_repository: UserRepository,
    ):
        """
        Initialize service with repositories.

        Args:
            project_repository: Repository for project persistence
            workflow_repository: Repository for workflow persistence
            board_repository: Repository for board persistence
            sprint_repository: Repository for sprint persistence
            task_repository: Repository for task persistence
            user_repository: Repository for user lookups
        """
        self._projects = project_repository
        self._workflows = workflow_repository
        self._boards = board_repository
        self._sprints = sprint_repository
        self._tasks = task_repository
        self._users = user_repository
        self._create_use_case = CreateProjectUseCase(project_repository, workflow_repository, board_repository)
        self._authorize = AuthorizeProjectUseCase(project_repository)

    def create_project(
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
        Create a project with its workflow and board.

        Returns:
            Created project entity
        """
        return self._create_use_case.execute(
            organization_id=organization_id,
            creator=creator,
            key=key,
            name=name,
            description=description,
            methodology=methodology,
            team_ids=team_ids,
            start_date=start_date,
            end_date=end_date,
        )

    def list_projects(self, organization_id: str, user: User, include_archived: bool = False) -> List[Project]:
        """Admins see every project of the organization; others see the ones they belong to."""
        member_id = None if user.is_admin() else user.id
        return self._projects.find_for_member(organization_id, member_id, include_archived)

    def get_project(self, organization_id: str, user: User, project_id: str) -> Project:
        return self._authorize.execute(organization_id, project_id, user, ProjectPermission.VIEW_PROJECT)

    def update_project(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        team_ids: Optional[List[str]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Project:
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.UPDATE_PROJECT)
        if name is not None:
            project.name = name.strip()
        if description is not None:
            project.description = description
        if team_ids is not None:
            project.team_ids = team_ids
        if start_date is not None:
            project.start_date = start_date
        if end_date is not None:
            project.end_date = end_date
        if project.start_date and project.end_date and project.end_date < project.start_date:
            raise ValidationError("End date must be after start date")
        return self._projects.update(project)

    def archive_project(self, organization_id: str, user: User, project_id: str) -> Project:
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.UPDATE_PROJECT)
        project.archive()
        archived = self._projects.update(project)
        logger.info("Project archived: %s", project.key)
        return archived

    def delete_project(self, organization_id: str, user: User, project_id: str) -> None:
        """Delete a project with its tasks, sprints, workflow and board."""
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.DELETE_PROJECT)
        tasks = self._tasks.delete_by_project(project.id)
        sprints = self._sprints.delete_by_project(project.id)
        self._workflows.delete_by_project(project.id)
        self._boards.delete_by_project(project.id)
        self._projects.delete(project.id)
        logger.info("Project deleted: %s (%d tasks, %d sprints)", project.key, tasks, sprints)

    def add_member(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        member_id: str,
        role: str = ProjectRole.CONTRIBUTOR,
    ) -> Project:
        """
        Raises:
            NotFoundError: If the user is not part of the organization
            ConflictError: If the user is already a member
        """
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.MANAGE_MEMBERS)
        member = self._users.find_by_id(member_id)
        if member is None or member.organization_id != organization_id:
            raise NotFoundError.for_resource("User", member_id)
        if project.find_member(member_id) is not None:
            raise ConflictError("User is already a project member")
        project.add_member(member_id, role)
        return self._projects.update(project)

    def remove_member(self, organization_id: str, user: User, project_id: str, member_id: str) -> Project:
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.MANAGE_MEMBERS)
        if not project.remove_member(member_id):
            raise NotFoundError("User is not a project member")
        return self._projects.update(project)

    def update_member_role(self, organization_id: str, user: User, project_id: str, member_id: str, role: str) -> Project:
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.MANAGE_MEMBERS)
        if project.find_member(member_id) is None:
            raise NotFoundError("User is not a project member")
        project.update_member_role(member_id, role)
        return self._projects.update(project)
