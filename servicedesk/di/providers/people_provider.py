from typing import TYPE_CHECKING

from servicedesk.domain.repositories.leave_request_repository import LeaveRequestRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.organization_repository import OrganizationRepository
from servicedesk.domain.repositories.team_repository import TeamRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.application.services.auth_service import AuthService
from servicedesk.application.services.leave_request_service import LeaveRequestService
from servicedesk.application.services.notification_service import NotificationService
from servicedesk.application.services.organization_service import OrganizationService
from servicedesk.application.services.team_service import TeamService

if TYPE_CHECKING:
    from servicedesk.di.base_container import BaseContainer


class PeopleProvider:
    """People service provider - registers auth, organization, team, leave and notification services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        container.register_singleton(
            AuthService,
            AuthService(
                user_repository=container.get(UserRepository),
                organization_repository=container.get(OrganizationRepository),
            )
        )
        container.register_singleton(
            OrganizationService,
            OrganizationService(
                organization_repository=container.get(OrganizationRepository),
                user_repository=container.get(UserRepository),
            )
        )
        container.register_singleton(
            TeamService,
            TeamService(
                team_repository=container.get(TeamRepository),
                user_repository=container.get(UserRepository),
            )
        )
        container.register_singleton(
            LeaveRequestService,
            LeaveRequestService(
                leave_request_repository=container.get(LeaveRequestRepository),
                team_repository=container.get(TeamRepository),
                notification_repository=container.get(NotificationRepository),
            )
        )
        container.register_singleton(
            NotificationService,
            NotificationService(
                notification_repository=container.get(NotificationRepository),
            )
        )
