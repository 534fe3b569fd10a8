"""
Release Repository Interface
============================
"""
from abc import abstractmethod
from typing import Optional

from servicedesk.domain.models.release import Release
from servicedesk.domain.repositories.base_repository import TenantRepository


class ReleaseRepository(TenantRepository[Release]):

    @abstractmethod
    def find_by_ticket_id(self, organization_id: str, release_id: str) -> Optional[Release]:
        """Find a release by its ticket id (REL-YYYY-NNNNN)."""
        pass
