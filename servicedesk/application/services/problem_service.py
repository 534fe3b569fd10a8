"""
Problem Service
===============

Application service for problem management and known errors.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.itsm_constants import ProblemStatus
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import PersonRef, calculate_priority
from servicedesk.domain.models.problem import KnownError, Problem, ProblemResolution
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.application.use_cases.problem.create_problem import CreateProblemUseCase
from servicedesk.utils.id_utils import short_token

logger = logging.getLogger(__name__)


class ProblemService:
    """
    Application service for problem operations.

    Problems and incidents reference each other by ticket id.
    """

    def __init__(
        self,
        problem_repository: ProblemRepository,
        incident_repository: IncidentRepository,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
    ):
        self._problems = problem_repository
        self._incidents = incident_repository
        self._users = user_repository
        self._create_use_case = CreateProblemUseCase(
            problem_repository, incident_repository, GenerateTicketIdUseCase(counter_repository)
        )

    def create_problem(
        self,
        organization_id: str,
        creator: User,
        title: str,
        description: str,
        impact: str,
        urgency: str,
        priority: Optional[str] = None,
        category_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        linked_incidents: Optional[List[str]] = None,
        affected_services: Optional[List[str]] = None,
        site_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Problem:
        """
        Log a problem. Without an explicit priority the impact x urgency
        matrix decides.
        """
        return self._create_use_case.execute(
            organization_id=organization_id,
            creator=creator,
            title=title,
            description=description,
            priority=priority or calculate_priority(impact, urgency),
            impact=impact,
            category_id=category_id,
            owner=self._owner(organization_id, owner_id),
            linked_incidents=linked_incidents,
            affected_services=affected_services,
            site_id=site_id,
            tags=tags,
        )

    def create_from_incident(self, organization_id: str, creator: User, incident_ref: str) -> Problem:
        """Open a problem that copies an incident's details and links back to it."""
        incident = self._get_incident(organization_id, incident_ref)
        if incident.linked_problem_id:
            raise ValidationError(f"Incident is already linked to problem {incident.linked_problem_id}")
        return self._create_use_case.execute(
            organization_id=organization_id,
            creator=creator,
            title=incident.title,
            description=incident.description,
            priority=incident.priority,
            impact=incident.impact,
            category_id=incident.category_id,
            owner=PersonRef.of(creator),
            linked_incidents=[incident.incident_id],
            site_id=incident.site_id,
            tags=list(incident.tags),
        )

    def list_problems(
        self,
        organization_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        owner_id: Optional[str] = None,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Problem], int]:
        filters = {"status": status, "priority": priority, "owner.id": owner_id, "category_id": category_id}
        return self._problems.find_page(organization_id, filters, page, limit, search)

    def get_problem(self, organization_id: str, problem_ref: str) -> Problem:
        problem = self._problems.find_in_organization(organization_id, problem_ref)
        if problem is None:
            problem = self._problems.find_by_ticket_id(organization_id, problem_ref)
        if problem is None:
            raise NotFoundError.for_resource("Problem", problem_ref)
        return problem

    def update_problem(self, organization_id: str, actor: User, problem_ref: str, changes: Dict[str, Any]) -> Problem:
        problem = self.get_problem(organization_id, problem_ref)
        if problem.status == ProblemStatus.CLOSED:
            raise ValidationError("Cannot update a closed problem")
        for field in ("title", "description", "priority", "impact", "category_id", "affected_services", "tags"):
            if field in changes:
                setattr(problem, field, changes[field])
        if "owner_id" in changes:
            problem.owner = self._owner(organization_id, changes["owner_id"])
        problem.add_event("Problem updated", actor.id, actor.name)
        return self._problems.update(problem)

    def set_root_cause(
        self,
        organization_id: str,
        actor: User,
        problem_ref: str,
        root_cause: str,
        workaround: Optional[str] = None,
    ) -> Problem:
        problem = self.get_problem(organization_id, problem_ref)
        problem.set_root_cause(root_cause, workaround)
        problem.add_event("Root cause identified", actor.id, actor.name)
        return self._problems.update(problem)

    def create_known_error(
        self,
        organization_id: str,
        actor: User,
        problem_ref: str,
        title: str,
        symptoms: str,
        root_cause: str,
        workaround: str,
    ) -> Problem:
        problem = self.get_problem(organization_id, problem_ref)
        if problem.status in (ProblemStatus.RESOLVED, ProblemStatus.CLOSED):
            raise ValidationError(f"Cannot record a known error on a {problem.status} problem")
        known_error = KnownError(
            ke_id=short_token("KE"),
            title=title,
            symptoms=symptoms,
            root_cause=root_cause,
            workaround=workaround,
            documented_by=actor.id,
        )
        problem.mark_known_error(known_error)
        problem.add_event(f"Known error {known_error.ke_id} documented", actor.id, actor.name)
        updated = self._problems.update(problem)
        logger.info("Known error %s recorded on %s", known_error.ke_id, updated.problem_id)
        return updated

    def link_incident(self, organization_id: str, actor: User, problem_ref: str, incident_ref: str) -> Problem:
        problem = self.get_problem(organization_id, problem_ref)
        incident = self._get_incident(organization_id, incident_ref)
        if not problem.link_incident(incident.incident_id):
            raise ValidationError(f"Incident {incident.incident_id} is already linked")
        problem.add_event(f"Incident {incident.incident_id} linked", actor.id, actor.name)
        updated = self._problems.update(problem)

        incident.linked_problem_id = problem.problem_id
        incident.add_event(f"Linked to problem {problem.problem_id}", actor.id, actor.name)
        self._incidents.update(incident)
        return updated

    def change_status(self, organization_id: str, actor: User, problem_ref: str, status: str) -> Problem:
        problem = self.get_problem(organization_id, problem_ref)
        previous = problem.status
        problem.change_status(status)
        problem.add_event(f"Status changed from {previous} to {status}", actor.id, actor.name)
        return self._problems.update(problem)

    def resolve(self, organization_id: str, actor: User, problem_ref: str, permanent_fix: str) -> Problem:
        """Resolve with a permanent fix; every linked incident gets a timeline entry."""
        problem = self.get_problem(organization_id, problem_ref)
        problem.resolve(ProblemResolution(permanent_fix=permanent_fix, resolved_by=actor.id, resolved_by_name=actor.name))
        problem.add_event("Problem resolved", actor.id, actor.name)
        updated = self._problems.update(problem)

        for ticket_id in updated.linked_incidents:
            incident = self._incidents.find_by_ticket_id(organization_id, ticket_id)
            if incident is None:
                logger.warning("Linked incident %s of %s no longer exists", ticket_id, updated.problem_id)
                continue
            incident.add_event(f"Problem {updated.problem_id} resolved", actor.id, actor.name)
            self._incidents.update(incident)
        return updated

    def stats(self, organization_id: str) -> Dict[str, Any]:
        by_status = self._problems.count_by(organization_id, "status")
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_priority": self._problems.count_by(organization_id, "priority"),
            "open": sum(by_status.get(status, 0) for status in ProblemStatus.OPEN),
            "known_errors": by_status.get(ProblemStatus.KNOWN_ERROR, 0),
        }

    def _owner(self, organization_id: str, owner_id: Optional[str]) -> Optional[PersonRef]:
        if not owner_id:
            return None
        owner = self._users.find_by_id(owner_id)
        if owner is None or owner.organization_id != organization_id:
            raise NotFoundError.for_resource("User", owner_id)
        return PersonRef.of(owner)

    def _get_incident(self, organization_id: str, incident_ref: str) -> Incident:
        incident = self._incidents.find_in_organization(organization_id, incident_ref)
        if incident is None:
            incident = self._incidents.find_by_ticket_id(organization_id, incident_ref)
        if incident is None:
            raise NotFoundError.for_resource("Incident", incident_ref)
        return incident
