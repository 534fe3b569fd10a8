"""
Organization Repository Interface
=================================
"""
from abc import abstractmethod
from typing import Optional

from servicedesk.domain.models.organization import Organization
from servicedesk.domain.repositories.base_repository import Repository


class OrganizationRepository(Repository[Organization]):

    @abstractmethod
    def find_by_slug(self, slug: str) -> Optional[Organization]:
        """
        Find an organization by slug.

        Args:
            slug: URL-safe organization name

        Returns:
            Organization if found, None otherwise
        """
        pass
