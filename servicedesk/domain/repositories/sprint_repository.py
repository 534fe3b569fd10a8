"""
Sprint Repository Interface
===========================
"""
from abc import abstractmethod
from typing import List, Optional

from servicedesk.domain.models.sprint import Sprint
from servicedesk.domain.repositories.base_repository import Repository


class SprintRepository(Repository[Sprint]):

    @abstractmethod
    def find_by_project(self, project_id: str) -> List[Sprint]:
        """
        Find the sprints of a project.

        Returns:
            Sprints, most recent number first
        """
        pass

    @abstractmethod
    def find_active(self, project_id: str) -> Optional[Sprint]:
        """Find the active sprint of a project, if any."""
        pass

    @abstractmethod
    def find_completed(self, project_id: str, limit: int) -> List[Sprint]:
        """
        Find the most recently completed sprints.

        Args:
            project_id: Project identifier
            limit: Maximum number of sprints

        Returns:
            Completed sprints, newest completion first
        """
        pass

    @abstractmethod
    def find_by_number(self, project_id: str, number: int) -> Optional[Sprint]:
        pass

    @abstractmethod
    def find_active_in_organization(self, organization_id: str) -> List[Sprint]:
        """Find all active sprints of an organization."""
        pass

    @abstractmethod
    def delete_by_project(self, project_id: str) -> int:
        pass
