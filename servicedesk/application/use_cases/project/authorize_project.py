"""
Authorize Project Use Case
==========================

Loads a project and checks a project permission for the acting user.
"""
from servicedesk.core.errors import AuthorizationError, NotFoundError
from servicedesk.domain.constants.pm_constants import ProjectPermission
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.project_repository import ProjectRepository


class AuthorizeProjectUseCase:
    """Organization admins hold every permission; others get those of their project role."""

    def __init__(self, project_repository: ProjectRepository):
        self._projects = project_repository

    def execute(
        self,
        organization_id: str,
        project_id: str,
        user: User,
        permission: str = ProjectPermission.VIEW_PROJECT,
    ) -> Project:
        """
        Raises:
            NotFoundError: If the project is not in the organization
            AuthorizationError: If the user lacks the permission
        """
        project = self._projects.find_in_organization(organization_id, project_id)
        if project is None:
            raise NotFoundError.for_resource("Project", project_id)
        if not project.has_permission(user.id, permission, is_admin=user.is_admin()):
            raise AuthorizationError(f"Missing project permission: {permission}")
        return project
