"""
SLA Policy Repository Interface
===============================
"""
from abc import abstractmethod
from typing import List, Optional

from servicedesk.domain.models.sla import SLAPolicy
from servicedesk.domain.repositories.base_repository import TenantRepository


class SLARepository(TenantRepository[SLAPolicy]):

    @abstractmethod
    def find_by_sla_id(self, organization_id: str, sla_id: str) -> Optional[SLAPolicy]:
        pass

    @abstractmethod
    def find_active_for_priority(self, organization_id: str, priority: str) -> List[SLAPolicy]:
        """
        Find the active policies of one priority.

        Args:
            organization_id: Tenant identifier
            priority: Ticket priority

        Returns:
            Active policies, oldest first
        """
        pass
