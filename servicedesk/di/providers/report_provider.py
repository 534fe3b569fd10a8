from typing import TYPE_CHECKING

from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.application.services.report_service import ReportService

if TYPE_CHECKING:
    from servicedesk.di.base_container import BaseContainer


class ReportProvider:
    """Report service provider"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        container.register_singleton(
            ReportService,
            ReportService(
                incident_repository=container.get(IncidentRepository),
                problem_repository=container.get(ProblemRepository),
                change_repository=container.get(ChangeRepository),
                task_repository=container.get(TaskRepository),
                sprint_repository=container.get(SprintRepository),
                project_repository=container.get(ProjectRepository),
            )
        )
