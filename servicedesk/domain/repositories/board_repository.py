"""
Board Repository Interface
==========================
"""
from abc import abstractmethod
from typing import Optional

from servicedesk.domain.models.board import Board
from servicedesk.domain.repositories.base_repository import Repository


class BoardRepository(Repository[Board]):

    @abstractmethod
    def find_by_project(self, project_id: str) -> Optional[Board]:
        """Find the default board of a project."""
        pass

    @abstractmethod
    def delete_by_project(self, project_id: str) -> int:
        """Delete the boards of a project. Returns the number deleted."""
        pass
