"""
Change Repository Interface
===========================
"""
from abc import abstractmethod
from typing import Optional

from servicedesk.domain.models.change import Change
from servicedesk.domain.repositories.base_repository import TenantRepository


class ChangeRepository(TenantRepository[Change]):

    @abstractmethod
    def find_by_ticket_id(self, organization_id: str, change_id: str) -> Optional[Change]:
        """Find a change by its ticket id (CHG-YYYY-NNNNN)."""
        pass
