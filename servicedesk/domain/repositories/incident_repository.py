"""
Incident Repository Interface
=============================
"""
from abc import abstractmethod
from typing import List, Optional

from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import SLATracking
from servicedesk.domain.repositories.base_repository import TenantRepository


class IncidentRepository(TenantRepository[Incident]):
    """
    Abstract repository for incident persistence operations.

    Incidents are addressed by their human-readable `incident_id`
    (INC-YYYY-NNNNN) as well as by entity id.
    """

    @abstractmethod
    def find_by_ticket_id(self, organization_id: str, incident_id: str) -> Optional[Incident]:
        """
        Find an incident by its ticket id.

        Args:
            organization_id: Tenant identifier
            incident_id: Ticket id, e.g. INC-2026-00001

        Returns:
            Incident if found, None otherwise
        """
        pass

    @abstractmethod
    def find_active(self, organization_id: Optional[str] = None) -> List[Incident]:
        """
        Find incidents whose SLA clock can still run (open, in progress, pending).

        Args:
            organization_id: Restrict to one organization; all organizations when None
        """
        pass

    @abstractmethod
    def find_sla_records(self, organization_id: str) -> List[SLATracking]:
        """SLA tracking of every incident of an organization (for compliance)."""
        pass
