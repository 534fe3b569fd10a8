"""
Report Service
==============

Cross-module read models: the organization dashboard and project velocity.
"""
from typing import Any, Dict

from servicedesk.domain.constants.itsm_constants import ChangeStatus, IncidentStatus, ProblemStatus
from servicedesk.domain.constants.pm_constants import ProjectPermission
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.domain.services import sla_calculator, sprint_metrics
from servicedesk.application.use_cases.project.authorize_project import AuthorizeProjectUseCase

DEFAULT_VELOCITY_SPRINTS = 6


class ReportService:
    """Application service for reports."""

    def __init__(
        self,
        incident_repository: IncidentRepository,
        problem_repository: ProblemRepository,
        change_repository: ChangeRepository,
        task_repository: TaskRepository,
        sprint_repository: SprintRepository,
        project_repository: ProjectRepository,
    ):
        self._incidents = incident_repository
        self._problems = problem_repository
        self._changes = change_repository
        self._tasks = task_repository
        self._sprints = sprint_repository
        self._authorize = AuthorizeProjectUseCase(project_repository)

    def dashboard(self, organization_id: str) -> Dict[str, Any]:
        incidents_by_status = self._incidents.count_by(organization_id, "status")
        compliance = sla_calculator.calculate_compliance(self._incidents.find_sla_records(organization_id))
        active_sprints = self._sprints.find_active_in_organization(organization_id)
        return {
            "incidents": {
                "by_status": incidents_by_status,
                "by_priority": self._incidents.count_by(organization_id, "priority"),
                "open": sum(incidents_by_status.get(s, 0) for s in IncidentStatus.ACTIVE),
                "breached": self._incidents.count(organization_id, {"sla.breach_flag": True}),
                "sla_compliance": compliance["compliance_percent"],
            },
            "problems": {
                "open": self._problems.count(organization_id, {"status": list(ProblemStatus.OPEN)}),
            },
            "changes": {
                "awaiting_cab": self._changes.count(
                    organization_id, {"status": [ChangeStatus.SUBMITTED, ChangeStatus.CAB_REVIEW]}
                ),
            },
            "tasks": {
                "by_category": self._tasks.count_by_category(organization_id),
            },
            "sprints": {
                "active": len(active_sprints),
                "items": [
                    {"id": s.id, "name": s.name, "project_id": s.project_id, "end_date": s.end_date}
                    for s in active_sprints
                ],
            },
        }

    def project_velocity(
        self,
        organization_id: str,
        user: User,
        project_id: str,
        sprints: int = DEFAULT_VELOCITY_SPRINTS,
    ) -> Dict[str, Any]:
        """Planned and completed points of the last completed sprints, newest first."""
        project = self._authorize.execute(organization_id, project_id, user, ProjectPermission.VIEW_PROJECT)
        completed = self._sprints.find_completed(project.id, max(sprints, 1))
        rows = [
            {
                "sprint_id": s.id,
                "name": s.name,
                "number": s.number,
                "planned": s.velocity.planned if s.velocity else 0,
                "completed": s.velocity.completed if s.velocity else 0,
                "completed_at": s.completed_at,
            }
            for s in completed
        ]
        return {
            "project_id": project.id,
            "sprints": rows,
            "average": sprint_metrics.rolling_average([r["completed"] for r in rows]),
        }
