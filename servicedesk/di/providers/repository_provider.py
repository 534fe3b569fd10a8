from typing import TYPE_CHECKING

from servicedesk.core.config import get_settings
from servicedesk.domain.repositories.board_repository import BoardRepository
from servicedesk.domain.repositories.category_repository import CategoryRepository
from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.knowledge_article_repository import KnowledgeArticleRepository
from servicedesk.domain.repositories.leave_request_repository import LeaveRequestRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.organization_repository import OrganizationRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.release_repository import ReleaseRepository
from servicedesk.domain.repositories.service_catalog_repository import (
    ServiceCatalogRepository,
    ServiceRequestRepository,
)
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.repositories.team_repository import TeamRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.infrastructure.db.mongo_board_repository import MongoBoardRepository
from servicedesk.infrastructure.db.mongo_counter_repository import MongoCounterRepository
from servicedesk.infrastructure.db.mongo_itsm_repositories import (
    MongoChangeRepository,
    MongoIncidentRepository,
    MongoProblemRepository,
    MongoReleaseRepository,
    MongoServiceCatalogRepository,
    MongoServiceRequestRepository,
    MongoSLARepository,
)
from servicedesk.infrastructure.db.mongo_knowledge_repositories import (
    MongoCategoryRepository,
    MongoKnowledgeArticleRepository,
)
from servicedesk.infrastructure.db.mongo_leave_request_repository import MongoLeaveRequestRepository
from servicedesk.infrastructure.db.mongo_notification_repository import MongoNotificationRepository
from servicedesk.infrastructure.db.mongo_organization_repository import MongoOrganizationRepository
from servicedesk.infrastructure.db.mongo_project_repository import MongoProjectRepository
from servicedesk.infrastructure.db.mongo_sprint_repository import MongoSprintRepository
from servicedesk.infrastructure.db.mongo_task_repository import MongoTaskRepository
from servicedesk.infrastructure.db.mongo_team_repository import MongoTeamRepository
from servicedesk.infrastructure.db.mongo_user_repository import MongoUserRepository
from servicedesk.infrastructure.db.mongo_workflow_repository import MongoWorkflowRepository

if TYPE_CHECKING:
    from servicedesk.di.base_container import BaseContainer


class RepositoryProvider:
    """Repository registration provider - wires domain interfaces to infrastructure implementations"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all repository implementations.
        Gets database client from database provider and creates repository instances.
        """
        mongo_client = container.get("mongo_client")
        settings = get_settings()

        # Domain interfaces -> Infrastructure implementations
        registrations = [
            (UserRepository, MongoUserRepository, settings.users_collection),
            (OrganizationRepository, MongoOrganizationRepository, settings.organizations_collection),
            (TeamRepository, MongoTeamRepository, settings.teams_collection),
            (LeaveRequestRepository, MongoLeaveRequestRepository, settings.leave_requests_collection),
            (NotificationRepository, MongoNotificationRepository, settings.notifications_collection),
            (ProjectRepository, MongoProjectRepository, settings.projects_collection),
            (WorkflowRepository, MongoWorkflowRepository, settings.workflows_collection),
            (BoardRepository, MongoBoardRepository, settings.boards_collection),
            (SprintRepository, MongoSprintRepository, settings.sprints_collection),
            (TaskRepository, MongoTaskRepository, settings.tasks_collection),
            (IncidentRepository, MongoIncidentRepository, settings.incidents_collection),
            (ProblemRepository, MongoProblemRepository, settings.problems_collection),
            (ChangeRepository, MongoChangeRepository, settings.changes_collection),
            (ReleaseRepository, MongoReleaseRepository, settings.releases_collection),
            (SLARepository, MongoSLARepository, settings.slas_collection),
            (ServiceCatalogRepository, MongoServiceCatalogRepository, settings.service_catalog_collection),
            (ServiceRequestRepository, MongoServiceRequestRepository, settings.service_requests_collection),
            (CategoryRepository, MongoCategoryRepository, settings.categories_collection),
            (KnowledgeArticleRepository, MongoKnowledgeArticleRepository, settings.knowledge_articles_collection),
            (CounterRepository, MongoCounterRepository, settings.counters_collection),
        ]
        for interface, implementation, collection_name in registrations:
            container.register_singleton(
                interface,
                implementation(mongo_client.get_collection(collection_name)),
            )
