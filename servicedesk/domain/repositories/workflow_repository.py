"""
Workflow Repository Interface
=============================
"""
from abc import abstractmethod
from typing import Optional

from servicedesk.domain.models.workflow import Workflow
from servicedesk.domain.repositories.base_repository import Repository


class WorkflowRepository(Repository[Workflow]):

    @abstractmethod
    def find_by_project(self, project_id: str) -> Optional[Workflow]:
        """Find the workflow attached to a project."""
        pass

    @abstractmethod
    def find_organization_default(self, organization_id: str, methodology: str) -> Optional[Workflow]:
        """
        Find the organization's default workflow for a methodology.

        Args:
            organization_id: Tenant identifier
            methodology: Project methodology

        Returns:
            Default workflow if the organization defined one, None otherwise
        """
        pass

    @abstractmethod
    def delete_by_project(self, project_id: str) -> int:
        """Delete the workflows of a project. Returns the number deleted."""
        pass
