"""
Sweep SLA Breaches Use Case
===========================

Periodic check of every active incident against its SLA: flags breaches,
raises escalation levels and notifies the people involved.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from servicedesk.domain.constants.people_constants import NotificationLevel, NotificationType
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.sla import SLAPolicy
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.domain.services import sla_calculator
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


class SweepSLABreachesUseCase:
    """Use case for the SLA breach sweep."""

    def __init__(
        self,
        incident_repository: IncidentRepository,
        sla_repository: SLARepository,
        send_notification: SendNotificationUseCase,
    ):
        self._incidents = incident_repository
        self._slas = sla_repository
        self._notify = send_notification

    def execute(self, organization_id: Optional[str] = None, current_time: Optional[datetime] = None) -> Dict[str, int]:
        """
        Check active incidents (of one organization, or all of them).

        Args:
            organization_id: Limit the sweep to one tenant
            current_time: Clock override

        Returns:
            Counts of checked, newly breached and escalated incidents
        """
        current = current_time or utc_now()
        policies: Dict[tuple, Optional[SLAPolicy]] = {}
        checked = breached = escalated = 0

        for incident in self._incidents.find_active(organization_id):
            checked += 1
            policy = self._policy_for(incident, policies)
            result = sla_calculator.check_breach(incident.sla, incident.created_at, policy, current)
            if not result.is_breached:
                continue

            changed = False
            if not incident.sla.breach_flag:
                incident.sla = incident.sla.model_copy(update={"breach_flag": True})
                incident.add_event(f"SLA {result.breach_type} target breached", SYSTEM_ACTOR)
                breached += 1
                changed = True
                logger.info("SLA breached: %s (%s)", incident.incident_id, result.breach_type)
                self._notify_breach(incident, result.breach_type)

            if result.escalation_level > incident.sla.escalation_level:
                incident.sla = incident.sla.model_copy(update={"escalation_level": result.escalation_level})
                incident.add_event(
                    f"Escalated to level {result.escalation_level}",
                    SYSTEM_ACTOR,
                    details={"reason": "SLA breach"},
                )
                escalated += 1
                changed = True
                logger.info("Incident escalated: %s -> level %d", incident.incident_id, result.escalation_level)
                self._notify_escalation(incident, policy, result.escalation_level)

            if changed:
                self._incidents.update(incident)

        return {"checked": checked, "breached": breached, "escalated": escalated}

    def _policy_for(self, incident: Incident, cache: Dict[tuple, Optional[SLAPolicy]]) -> Optional[SLAPolicy]:
        key = (incident.organization_id, incident.sla.sla_id)
        if key not in cache:
            cache[key] = (
                None if incident.sla.sla_id == sla_calculator.DEFAULT_SLA_ID
                else self._slas.find_by_sla_id(incident.organization_id, incident.sla.sla_id)
            )
        return cache[key]

    def _notify_breach(self, incident: Incident, breach_type: str) -> None:
        if incident.assigned_to is None:
            return
        self._notify.execute(
            user_id=incident.assigned_to.technician_id,
            type=NotificationType.SLA_BREACH,
            title="SLA breached",
            message=f"{incident.incident_id} missed its {breach_type} target",
            organization_id=incident.organization_id,
            level=NotificationLevel.ERROR,
            entity_type="incident",
            entity_id=incident.id,
        )

    def _notify_escalation(self, incident: Incident, policy: Optional[SLAPolicy], level: int) -> None:
        recipients: List[str] = []
        if incident.assigned_to is not None:
            recipients.append(incident.assigned_to.technician_id)
        escalation = policy.escalation_for(level) if policy is not None else None
        if escalation is not None:
            recipients.extend(escalation.notify_users)
        self._notify.execute_many(
            recipients,
            type=NotificationType.INCIDENT_ESCALATED,
            title="Incident escalated",
            message=f"{incident.incident_id} escalated to level {level}",
            organization_id=incident.organization_id,
            level=NotificationLevel.WARNING,
            entity_type="incident",
            entity_id=incident.id,
            metadata={"escalation_level": level},
        )
