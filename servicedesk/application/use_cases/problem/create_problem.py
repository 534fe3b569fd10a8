"""
Create Problem Use Case
=======================
"""
import logging
from typing import List, Optional

from servicedesk.core.errors import NotFoundError
from servicedesk.domain.constants.itsm_constants import TicketPrefix
from servicedesk.domain.models.itsm_common import PersonRef
from servicedesk.domain.models.problem import Problem
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class CreateProblemUseCase:
    """
    Use case for logging a problem.

    Linked incidents are referenced by their ticket id; each one gets a
    timeline event and a back-reference to the problem.
    """

    def __init__(
        self,
        problem_repository: ProblemRepository,
        incident_repository: IncidentRepository,
        generate_ticket_id: GenerateTicketIdUseCase,
    ):
        self._problems = problem_repository
        self._incidents = incident_repository
        self._ticket_ids = generate_ticket_id

    def execute(
        self,
        organization_id: str,
        creator: User,
        title: str,
        description: str,
        priority: str,
        impact: str,
        category_id: Optional[str] = None,
        owner: Optional[PersonRef] = None,
        linked_incidents: Optional[List[str]] = None,
        affected_services: Optional[List[str]] = None,
        site_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Problem:
        """
        Raises:
            NotFoundError: If a linked incident does not exist in the organization
        """
        incidents = []
        for ticket_id in dict.fromkeys(linked_incidents or []):
            incident = self._incidents.find_by_ticket_id(organization_id, ticket_id)
            if incident is None:
                raise NotFoundError.for_resource("Incident", ticket_id)
            incidents.append(incident)

        problem = Problem(
            id=new_id(),
            problem_id=self._ticket_ids.execute(TicketPrefix.PROBLEM),
            organization_id=organization_id,
            title=title.strip(),
            description=description,
            priority=priority,
            impact=impact,
            category_id=category_id,
            owner=owner,
            linked_incidents=[i.incident_id for i in incidents],
            affected_services=affected_services or [],
            site_id=site_id,
            tags=tags or [],
            created_by=creator.id,
        )
        problem.add_event("Problem created", creator.id, creator.name)
        created = self._problems.create(problem)

        for incident in incidents:
            incident.linked_problem_id = created.problem_id
            incident.add_event(f"Linked to problem {created.problem_id}", creator.id, creator.name)
            self._incidents.update(incident)

        logger.info("Problem created: %s with %d linked incident(s)", created.problem_id, len(incidents))
        return created
