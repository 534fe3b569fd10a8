"""
Project Repository Interface
============================
"""
from abc import abstractmethod
from typing import List, Optional

from servicedesk.domain.models.project import Project
from servicedesk.domain.repositories.base_repository import TenantRepository


class ProjectRepository(TenantRepository[Project]):

    @abstractmethod
    def find_by_key(self, organization_id: str, key: str) -> Optional[Project]:
        """
        Find a project by its key.

        Args:
            organization_id: Tenant identifier
            key: Uppercase project key

        Returns:
            Project if found, None otherwise
        """
        pass

    @abstractmethod
    def find_for_member(self, organization_id: str, user_id: Optional[str] = None, include_archived: bool = False) -> List[Project]:
        """
        List projects of an organization.

        Args:
            organization_id: Tenant identifier
            user_id: When given, only projects the user is a member of
            include_archived: Include archived projects

        Returns:
            List of projects, newest first
        """
        pass
