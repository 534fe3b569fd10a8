"""
Resolve Workflow Use Case
=========================

Finds the workflow that governs a project's tasks.
"""
from servicedesk.domain.models.project import Project
from servicedesk.domain.models.workflow import Workflow, default_statuses, default_transitions
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.utils.id_utils import new_id


class ResolveWorkflowUseCase:
    """
    The project's own workflow, else the organization default for its
    methodology, else the built-in methodology default (not persisted).
    """

    def __init__(self, workflow_repository: WorkflowRepository):
        self._workflows = workflow_repository

    def execute(self, project: Project) -> Workflow:
        workflow = self._workflows.find_by_project(project.id)
        if workflow is not None:
            return workflow

        workflow = self._workflows.find_organization_default(project.organization_id, project.methodology)
        if workflow is not None:
            return workflow

        return Workflow(
            id=new_id(),
            organization_id=project.organization_id,
            project_id=project.id,
            name=f"{project.methodology.title()} Workflow",
            methodology=project.methodology,
            statuses=default_statuses(project.methodology),
            transitions=default_transitions(project.methodology),
            is_default=True,
        )
