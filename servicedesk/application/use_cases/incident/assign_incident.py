"""
Assign Incident Use Case
========================
"""
import logging
from typing import Optional

from servicedesk.core.errors import NotFoundError
from servicedesk.domain.constants.itsm_constants import IncidentStatus
from servicedesk.domain.constants.people_constants import NotificationType
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import Assignee
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.domain.services import sla_calculator
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase

logger = logging.getLogger(__name__)


class AssignIncidentUseCase:
    """
    Use case for assigning an incident to a technician.

    The first assignment is the first response: it records whether the
    response target was met. An open incident moves to in_progress.
    """

    def __init__(
        self,
        incident_repository: IncidentRepository,
        user_repository: UserRepository,
        send_notification: SendNotificationUseCase,
    ):
        self._incidents = incident_repository
        self._users = user_repository
        self._notify = send_notification

    def execute(
        self,
        incident: Incident,
        technician_id: str,
        actor: User,
        group_id: Optional[str] = None,
        group_name: Optional[str] = None,
    ) -> Incident:
        """
        Raises:
            NotFoundError: If the technician is not a user of the organization
            ValidationError: If the incident is closed
        """
        technician = self._users.find_by_id(technician_id)
        if technician is None or technician.organization_id != incident.organization_id:
            raise NotFoundError.for_resource("User", technician_id)

        assignee = Assignee(
            technician_id=technician.id,
            name=technician.name,
            email=technician.email,
            group_id=group_id,
            group_name=group_name,
        )
        if incident.assign(assignee, actor.id, actor.name):
            incident.sla = sla_calculator.mark_response_met(incident.sla)
        if incident.status == IncidentStatus.OPEN:
            incident.change_status(IncidentStatus.IN_PROGRESS, actor.id, actor.name)

        updated = self._incidents.update(incident)

        if technician.id != actor.id:
            self._notify.execute(
                user_id=technician.id,
                type=NotificationType.INCIDENT_ASSIGNED,
                title="Incident assigned",
                message=f"{updated.incident_id}: {updated.title}",
                organization_id=updated.organization_id,
                entity_type="incident",
                entity_id=updated.id,
                metadata={"priority": updated.priority},
            )
        logger.info("Incident assigned: %s -> %s", updated.incident_id, technician.name)
        return updated
