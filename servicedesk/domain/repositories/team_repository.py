"""
Team Repository Interface
=========================
"""
from abc import abstractmethod
from typing import List

from servicedesk.domain.models.team import Team
from servicedesk.domain.repositories.base_repository import TenantRepository


class TeamRepository(TenantRepository[Team]):

    @abstractmethod
    def find_by_member(self, organization_id: str, user_id: str) -> List[Team]:
        """
        Find the teams a user belongs to.

        Args:
            organization_id: Tenant identifier
            user_id: Member user id

        Returns:
            List of team entities
        """
        pass
