"""
Dependency Container
====================

FastAPI dependencies: services resolved from the DI container held on the
application, the signed-in user and the selected organization.
"""
from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from servicedesk.core.errors import AuthenticationError, AuthorizationError
from servicedesk.di.container import DIContainer
from servicedesk.domain.models.user import User
from servicedesk.application.services.auth_service import AuthService
from servicedesk.application.services.board_service import BoardService
from servicedesk.application.services.category_service import CategoryService
from servicedesk.application.services.change_service import ChangeService
from servicedesk.application.services.incident_service import IncidentService
from servicedesk.application.services.knowledge_service import KnowledgeService
from servicedesk.application.services.leave_request_service import LeaveRequestService
from servicedesk.application.services.notification_service import NotificationService
from servicedesk.application.services.organization_service import OrganizationService
from servicedesk.application.services.problem_service import ProblemService
from servicedesk.application.services.project_service import ProjectService
from servicedesk.application.services.release_service import ReleaseService
from servicedesk.application.services.report_service import ReportService
from servicedesk.application.services.service_catalog_service import ServiceCatalogService
from servicedesk.application.services.sla_service import SLAService
from servicedesk.application.services.sprint_service import SprintService
from servicedesk.application.services.task_service import TaskService
from servicedesk.application.services.team_service import TeamService
from servicedesk.application.services.workflow_service import WorkflowService

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> DIContainer:
    """
    Get the DI container the application was built with.

    Returns:
        DIContainer instance with all dependencies registered
    """
    return request.app.state.container


def get_auth_service(request: Request) -> AuthService:
    return get_container(request).get(AuthService)


def get_organization_service(request: Request) -> OrganizationService:
    return get_container(request).get(OrganizationService)


def get_team_service(request: Request) -> TeamService:
    return get_container(request).get(TeamService)


def get_leave_request_service(request: Request) -> LeaveRequestService:
    return get_container(request).get(LeaveRequestService)


def get_notification_service(request: Request) -> NotificationService:
    return get_container(request).get(NotificationService)


def get_project_service(request: Request) -> ProjectService:
    return get_container(request).get(ProjectService)


def get_workflow_service(request: Request) -> WorkflowService:
    return get_container(request).get(WorkflowService)


def get_task_service(request: Request) -> TaskService:
    return get_container(request).get(TaskService)


def get_sprint_service(request: Request) -> SprintService:
    return get_container(request).get(SprintService)


def get_board_service(request: Request) -> BoardService:
    return get_container(request).get(BoardService)


def get_incident_service(request: Request) -> IncidentService:
    return get_container(request).get(IncidentService)


def get_problem_service(request: Request) -> ProblemService:
    return get_container(request).get(ProblemService)


def get_change_service(request: Request) -> ChangeService:
    return get_container(request).get(ChangeService)


def get_release_service(request: Request) -> ReleaseService:
    return get_container(request).get(ReleaseService)


def get_sla_service(request: Request) -> SLAService:
    return get_container(request).get(SLAService)


def get_service_catalog_service(request: Request) -> ServiceCatalogService:
    return get_container(request).get(ServiceCatalogService)


def get_category_service(request: Request) -> CategoryService:
    return get_container(request).get(CategoryService)


def get_knowledge_service(request: Request) -> KnowledgeService:
    return get_container(request).get(KnowledgeService)


def get_report_service(request: Request) -> ReportService:
    return get_container(request).get(ReportService)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the user of the bearer token.

    Raises:
        AuthenticationError: If the token is missing or invalid, or the user
            is unknown or deactivated
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")
    return auth_service.get_user_from_token(credentials.credentials)


def get_organization_id(
    x_organization_id: Optional[str] = Header(None, alias="X-Organization-ID"),
    user: User = Depends(get_current_user),
) -> str:
    """
    Organization the request acts on.

    Defaults to the user's own organization. The header may only name the
    organization the user belongs to; organization admins are tenant-local.
    """
    organization_id = x_organization_id or user.organization_id
    if not organization_id:
        raise AuthorizationError("No organization selected")
    if organization_id != user.organization_id:
        raise AuthorizationError("You do not have access to this organization")
    return organization_id


def require_manager(user: User = Depends(get_current_user)) -> User:
    """Admins and managers only (SLA policies, service catalog items)."""
    if not user.is_manager():
        raise AuthorizationError("Only managers can perform this action")
    return user
