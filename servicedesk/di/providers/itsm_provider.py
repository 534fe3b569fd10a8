from typing import TYPE_CHECKING

from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.domain.repositories.release_repository import ReleaseRepository
from servicedesk.domain.repositories.service_catalog_repository import (
    ServiceCatalogRepository,
    ServiceRequestRepository,
)
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.application.services.change_service import ChangeService
from servicedesk.application.services.incident_service import IncidentService
from servicedesk.application.services.problem_service import ProblemService
from servicedesk.application.services.release_service import ReleaseService
from servicedesk.application.services.service_catalog_service import ServiceCatalogService
from servicedesk.application.services.sla_service import SLAService

if TYPE_CHECKING:
    from servicedesk.di.base_container import BaseContainer


class ITSMProvider:
    """ITSM provider - registers incident, problem, change, release, SLA and catalog services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        incidents = container.get(IncidentRepository)
        problems = container.get(ProblemRepository)
        changes = container.get(ChangeRepository)
        slas = container.get(SLARepository)
        users = container.get(UserRepository)
        counters = container.get(CounterRepository)
        notifications = container.get(NotificationRepository)

        container.register_singleton(
            IncidentService,
            IncidentService(
                incident_repository=incidents,
                problem_repository=problems,
                sla_repository=slas,
                user_repository=users,
                counter_repository=counters,
                notification_repository=notifications,
            )
        )
        container.register_singleton(
            ProblemService,
            ProblemService(
                problem_repository=problems,
                incident_repository=incidents,
                user_repository=users,
                counter_repository=counters,
            )
        )
        container.register_singleton(
            ChangeService,
            ChangeService(
                change_repository=changes,
                user_repository=users,
                counter_repository=counters,
                notification_repository=notifications,
            )
        )
        container.register_singleton(
            ReleaseService,
            ReleaseService(
                release_repository=container.get(ReleaseRepository),
                change_repository=changes,
                counter_repository=counters,
            )
        )
        container.register_singleton(
            SLAService,
            SLAService(
                sla_repository=slas,
                incident_repository=incidents,
                notification_repository=notifications,
            )
        )
        container.register_singleton(
            ServiceCatalogService,
            ServiceCatalogService(
                catalog_repository=container.get(ServiceCatalogRepository),
                request_repository=container.get(ServiceRequestRepository),
                sla_repository=slas,
                user_repository=users,
                counter_repository=counters,
                notification_repository=notifications,
            )
        )
