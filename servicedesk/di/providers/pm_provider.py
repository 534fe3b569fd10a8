from typing import TYPE_CHECKING

from servicedesk.domain.repositories.board_repository import BoardRepository
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.application.services.board_service import BoardService
from servicedesk.application.services.project_service import ProjectService
from servicedesk.application.services.sprint_service import SprintService
from servicedesk.application.services.task_service import TaskService
from servicedesk.application.services.workflow_service import WorkflowService

if TYPE_CHECKING:
    from servicedesk.di.base_container import BaseContainer


class ProjectManagementProvider:
    """Project management provider - registers project, workflow, task, sprint and board services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        projects = container.get(ProjectRepository)
        workflows = container.get(WorkflowRepository)
        boards = container.get(BoardRepository)
        sprints = container.get(SprintRepository)
        tasks = container.get(TaskRepository)
        users = container.get(UserRepository)
        counters = container.get(CounterRepository)
        notifications = container.get(NotificationRepository)

        container.register_singleton(
            ProjectService,
            ProjectService(
                project_repository=projects,
                workflow_repository=workflows,
                board_repository=boards,
                sprint_repository=sprints,
                task_repository=tasks,
                user_repository=users,
            )
        )
        container.register_singleton(
            WorkflowService,
            WorkflowService(
                project_repository=projects,
                workflow_repository=workflows,
                board_repository=boards,
                task_repository=tasks,
            )
        )
        container.register_singleton(
            TaskService,
            TaskService(
                task_repository=tasks,
                project_repository=projects,
                workflow_repository=workflows,
                sprint_repository=sprints,
                user_repository=users,
                counter_repository=counters,
                notification_repository=notifications,
            )
        )
        container.register_singleton(
            SprintService,
            SprintService(
                sprint_repository=sprints,
                project_repository=projects,
                task_repository=tasks,
                counter_repository=counters,
                notification_repository=notifications,
            )
        )
        container.register_singleton(
            BoardService,
            BoardService(
                board_repository=boards,
                project_repository=projects,
                workflow_repository=workflows,
                task_repository=tasks,
                sprint_repository=sprints,
            )
        )
