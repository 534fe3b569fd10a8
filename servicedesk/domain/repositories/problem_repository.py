"""
Problem Repository Interface
============================
"""
from abc import abstractmethod
from typing import Optional

from servicedesk.domain.models.problem import Problem
from servicedesk.domain.repositories.base_repository import TenantRepository


class ProblemRepository(TenantRepository[Problem]):

    @abstractmethod
    def find_by_ticket_id(self, organization_id: str, problem_id: str) -> Optional[Problem]:
        """Find a problem by its ticket id (PRB-YYYY-NNNNN)."""
        pass

    @abstractmethod
    def find_by_known_error(self, organization_id: str, ke_id: str) -> Optional[Problem]:
        """Find the problem that documents a known error."""
        pass
