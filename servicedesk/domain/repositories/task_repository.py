"""
Task Repository Interface
=========================
"""
from abc import abstractmethod
from typing import Dict, List, Optional

from servicedesk.domain.models.task import Task
from servicedesk.domain.repositories.base_repository import TenantRepository


class TaskRepository(TenantRepository[Task]):
    """
    Abstract repository for task persistence operations.

    Sprint membership changes are bulk operations because completing or
    deleting a sprint moves many tasks at once.
    """

    @abstractmethod
    def find_by_project(self, project_id: str) -> List[Task]:
        """Find all tasks of a project."""
        pass

    @abstractmethod
    def find_by_sprint(self, sprint_id: str) -> List[Task]:
        """Find all tasks planned in a sprint."""
        pass

    @abstractmethod
    def find_backlog(self, project_id: str) -> List[Task]:
        """
        Find project tasks without a sprint.

        Returns:
            Tasks ordered by backlog order, then creation time
        """
        pass

    @abstractmethod
    def move_to_sprint(self, task_ids: List[str], sprint_id: Optional[str]) -> int:
        """
        Set (or clear, with None) the sprint of several tasks.

        Returns:
            Number of tasks modified
        """
        pass

    @abstractmethod
    def clear_sprint(self, sprint_id: str) -> int:
        """Move every task of a sprint back to the backlog."""
        pass

    @abstractmethod
    def remove_subtask(self, parent_id: str, subtask_id: str) -> None:
        """Remove a subtask id from its parent's subtasks."""
        pass

    @abstractmethod
    def count_by_category(self, organization_id: str) -> Dict[str, int]:
        """Count an organization's tasks per status category."""
        pass

    @abstractmethod
    def delete_by_project(self, project_id: str) -> int:
        """Delete all tasks of a project."""
        pass
