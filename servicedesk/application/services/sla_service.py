"""
SLA Service
===========

SLA policy administration and the breach sweep.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import NotFoundError
from servicedesk.domain.models.sla import SLAPolicy
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.application.use_cases.sla.sweep_sla_breaches import SweepSLABreachesUseCase
from servicedesk.utils.id_utils import new_id, short_token

logger = logging.getLogger(__name__)

# Fields an SLA policy update may change
UPDATABLE_FIELDS = (
    "name", "description", "priority", "response_time", "resolution_time",
    "business_hours", "escalation_matrix", "applies_to", "is_default", "is_active",
)


class SLAService:
    """
    Application service for SLA policies.

    At most one default policy exists per priority: marking a policy as
    default clears the flag on the others of that priority.
    """

    def __init__(
        self,
        sla_repository: SLARepository,
        incident_repository: IncidentRepository,
        notification_repository: NotificationRepository,
    ):
        self._slas = sla_repository
        self._sweep_use_case = SweepSLABreachesUseCase(
            incident_repository, sla_repository, SendNotificationUseCase(notification_repository)
        )

    def create_policy(self, organization_id: str, **fields: Any) -> SLAPolicy:
        policy = SLAPolicy(
            id=new_id(),
            sla_id=short_token("SLA", 8),
            organization_id=organization_id,
            **fields,
        )
        created = self._slas.create(policy)
        if created.is_default:
            self._clear_other_defaults(created)
        logger.info("SLA policy created: %s (%s) priority=%s", created.name, created.sla_id, created.priority)
        return created

    def list_policies(
        self,
        organization_id: str,
        priority: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[SLAPolicy], int]:
        return self._slas.find_page(organization_id, {"priority": priority, "is_active": is_active}, page, limit)

    def get_policy(self, organization_id: str, policy_ref: str) -> SLAPolicy:
        policy = self._slas.find_in_organization(organization_id, policy_ref)
        if policy is None:
            policy = self._slas.find_by_sla_id(organization_id, policy_ref)
        if policy is None:
            raise NotFoundError.for_resource("SLA policy", policy_ref)
        return policy

    def update_policy(self, organization_id: str, policy_ref: str, changes: Dict[str, Any]) -> SLAPolicy:
        policy = self.get_policy(organization_id, policy_ref)
        data = policy.model_dump()
        data.update({k: v for k, v in changes.items() if k in UPDATABLE_FIELDS})
        updated = self._slas.update(SLAPolicy.model_validate(data))
        if updated.is_default:
            self._clear_other_defaults(updated)
        return updated

    def delete_policy(self, organization_id: str, policy_ref: str) -> None:
        policy = self.get_policy(organization_id, policy_ref)
        self._slas.delete(policy.id)
        logger.info("SLA policy deleted: %s", policy.sla_id)

    def sweep_breaches(
        self,
        organization_id: Optional[str] = None,
        current_time: Optional[datetime] = None,
    ) -> Dict[str, int]:
        return self._sweep_use_case.execute(organization_id, current_time)

    def _clear_other_defaults(self, policy: SLAPolicy) -> None:
        for other in self._slas.find_active_for_priority(policy.organization_id, policy.priority):
            if other.id != policy.id and other.is_default:
                other.is_default = False
                self._slas.update(other)
