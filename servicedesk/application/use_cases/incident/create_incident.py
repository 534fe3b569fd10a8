"""
Create Incident Use Case
========================

Business use case for logging a new incident.
"""
import logging
from typing import List, Optional

from servicedesk.domain.constants.itsm_constants import Channel, TicketPrefix
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import PersonRef, calculate_priority
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.domain.services import sla_calculator
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.utils.datetime_utils import now
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class CreateIncidentUseCase:
    """
    Use case for creating an incident.

    Priority comes from the impact x urgency matrix; SLA due dates come
    from the applicable policy (category, then site, then the organization
    default) or the built-in defaults.
    """

    def __init__(
        self,
        incident_repository: IncidentRepository,
        sla_repository: SLARepository,
        generate_ticket_id: GenerateTicketIdUseCase,
    ):
        self._incidents = incident_repository
        self._slas = sla_repository
        self._ticket_ids = generate_ticket_id

    def execute(
        self,
        organization_id: str,
        reporter: User,
        title: str,
        description: str,
        impact: str,
        urgency: str,
        category_id: Optional[str] = None,
        subcategory_id: Optional[str] = None,
        channel: str = Channel.SELF_SERVICE,
        requester: Optional[PersonRef] = None,
        site_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
        is_major: bool = False,
    ) -> Incident:
        """
        Execute the create incident use case.

        Returns:
            Created incident entity

        Raises:
            ValidationError: If the impact/urgency combination is invalid
        """
        priority = calculate_priority(impact, urgency)
        created_at = now()
        policy = sla_calculator.select_policy(
            self._slas.find_active_for_priority(organization_id, priority),
            priority,
            category_id,
            site_id,
        )

        incident = Incident(
            id=new_id(),
            incident_id=self._ticket_ids.execute(TicketPrefix.INCIDENT),
            organization_id=organization_id,
            title=title.strip(),
            description=description,
            priority=priority,
            impact=impact,
            urgency=urgency,
            category_id=category_id,
            subcategory_id=subcategory_id,
            requester=requester or PersonRef.of(reporter),
            channel=channel,
            sla=sla_calculator.calculate_sla(priority, created_at, policy),
            site_id=site_id,
            tags=tags or [],
            is_major=is_major,
            created_at=created_at,
            updated_at=created_at,
        )
        incident.add_event("Incident created", reporter.id, reporter.name)

        created = self._incidents.create(incident)
        logger.info(
            "Incident created: %s priority=%s sla=%s major=%s",
            created.incident_id, priority, created.sla.sla_id, is_major,
        )
        return created
