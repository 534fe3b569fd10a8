"""
Change Incident Status Use Case
===============================

Applies an incident status transition and keeps the SLA clock in step.
"""
import logging
from typing import Optional

from servicedesk.domain.constants.itsm_constants import IncidentStatus
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import Resolution
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.services import sla_calculator

logger = logging.getLogger(__name__)


class ChangeIncidentStatusUseCase:
    """
    Use case for changing an incident's status.

    Entering pending pauses the SLA clock and leaving pending resumes it.
    Resolving stores the resolution and records whether the resolution
    target was met; reopening clears that outcome again.
    """

    def __init__(self, incident_repository: IncidentRepository):
        self._incidents = incident_repository

    def execute(
        self,
        incident: Incident,
        new_status: str,
        actor: User,
        resolution: Optional[Resolution] = None,
        note: Optional[str] = None,
    ) -> Incident:
        """
        Raises:
            ValidationError: If the transition is not allowed from the current status
        """
        previous = incident.change_status(new_status, actor.id, actor.name)

        if previous == IncidentStatus.PENDING:
            incident.sla = sla_calculator.resume(incident.sla)
        if new_status == IncidentStatus.PENDING:
            incident.sla = sla_calculator.pause(incident.sla)

        if new_status == IncidentStatus.RESOLVED:
            if resolution is not None:
                incident.resolution = resolution
            incident.sla = sla_calculator.mark_resolution_met(incident.sla)
        elif previous == IncidentStatus.RESOLVED and new_status == IncidentStatus.OPEN:
            incident.sla = incident.sla.model_copy(update={"resolution_met": None, "resolved_at": None})

        if note:
            incident.add_event("Note added", actor.id, actor.name, {"note": note})

        updated = self._incidents.update(incident)
        logger.info("Incident %s status %s -> %s by %s", updated.incident_id, previous, new_status, actor.id)
        return updated
