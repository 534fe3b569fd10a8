"""
Incident Service
================

Application service that coordinates incident management.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.itsm_constants import Channel, IncidentStatus
from servicedesk.domain.constants.people_constants import NotificationLevel, NotificationType
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import PersonRef, Resolution, Worklog, calculate_priority
from servicedesk.domain.models.problem import Problem
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.domain.services import sla_calculator
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.application.use_cases.incident.assign_incident import AssignIncidentUseCase
from servicedesk.application.use_cases.incident.change_incident_status import ChangeIncidentStatusUseCase
from servicedesk.application.use_cases.incident.create_incident import CreateIncidentUseCase
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.utils.id_utils import short_token

logger = logging.getLogger(__name__)


class IncidentService:
    """
    Application service for incident operations.

    Incidents can be addressed by entity id or by ticket id (INC-YYYY-NNNNN).
    """

    def __init__(
        self,
        incident_repository: IncidentRepository,
        problem_repository: ProblemRepository,
        sla_repository: SLARepository,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
        notification_repository: NotificationRepository,
    ):
        """
        Initialize service with repositories.

        Args:
            incident_repository: Repository for incident persistence
            problem_repository: Repository for linked problems
            sla_repository: Repository for SLA policies
            user_repository: Repository for technician lookups
            counter_repository: Repository issuing ticket numbers
            notification_repository: Repository for user notifications
        """
        self._incidents = incident_repository
        self._problems = problem_repository
        self._notify = SendNotificationUseCase(notification_repository)
        self._create_use_case = CreateIncidentUseCase(
            incident_repository, sla_repository, GenerateTicketIdUseCase(counter_repository)
        )
        self._status_use_case = ChangeIncidentStatusUseCase(incident_repository)
        self._assign_use_case = AssignIncidentUseCase(incident_repository, user_repository, self._notify)

    def create_incident(
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
        Log a new incident.

        Returns:
            Created incident with its priority and SLA due dates
        """
        if not title or not title.strip():
            raise ValidationError("Incident title is required")
        return self._create_use_case.execute(
            organization_id=organization_id,
            reporter=reporter,
            title=title,
            description=description,
            impact=impact,
            urgency=urgency,
            category_id=category_id,
            subcategory_id=subcategory_id,
            channel=channel,
            requester=requester,
            site_id=site_id,
            tags=tags,
            is_major=is_major,
        )

    def list_incidents(
        self,
        organization_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assigned_to: Optional[str] = None,
        requester_id: Optional[str] = None,
        site_id: Optional[str] = None,
        category_id: Optional[str] = None,
        is_major: Optional[bool] = None,
        breached: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Incident], int]:
        filters = {
            "status": status,
            "priority": priority,
            "assigned_to.technician_id": assigned_to,
            "requester.id": requester_id,
            "site_id": site_id,
            "category_id": category_id,
            "is_major": is_major,
            "sla.breach_flag": breached,
        }
        return self._incidents.find_page(organization_id, filters, page, limit, search)

    def get_incident(self, organization_id: str, incident_ref: str) -> Incident:
        incident = self._incidents.find_in_organization(organization_id, incident_ref)
        if incident is None:
            incident = self._incidents.find_by_ticket_id(organization_id, incident_ref)
        if incident is None:
            raise NotFoundError.for_resource("Incident", incident_ref)
        return incident

    def update_incident(self, organization_id: str, actor: User, incident_ref: str, changes: Dict[str, Any]) -> Incident:
        """
        Apply a partial update. A new impact or urgency recomputes the priority.

        Raises:
            ValidationError: If the incident is closed or cancelled
        """
        incident = self.get_incident(organization_id, incident_ref)
        if incident.is_terminal():
            raise ValidationError(f"Cannot update a {incident.status} incident")

        for field in ("title", "description", "category_id", "subcategory_id", "site_id", "tags", "is_major"):
            if field in changes:
                setattr(incident, field, changes[field])
        if "impact" in changes or "urgency" in changes:
            incident.impact = changes.get("impact") or incident.impact
            incident.urgency = changes.get("urgency") or incident.urgency
            priority = calculate_priority(incident.impact, incident.urgency)
            if priority != incident.priority:
                incident.add_event(f"Priority changed from {incident.priority} to {priority}", actor.id, actor.name)
                incident.priority = priority
        incident.add_event("Incident updated", actor.id, actor.name, {"fields": sorted(changes)})
        return self._incidents.update(incident)

    def change_status(
        self,
        organization_id: str,
        actor: User,
        incident_ref: str,
        status: str,
        note: Optional[str] = None,
    ) -> Incident:
        incident = self.get_incident(organization_id, incident_ref)
        return self._status_use_case.execute(incident, status, actor, note=note)

    def assign(
        self,
        organization_id: str,
        actor: User,
        incident_ref: str,
        technician_id: str,
        group_id: Optional[str] = None,
        group_name: Optional[str] = None,
    ) -> Incident:
        incident = self.get_incident(organization_id, incident_ref)
        return self._assign_use_case.execute(incident, technician_id, actor, group_id, group_name)

    def resolve(
        self,
        organization_id: str,
        actor: User,
        incident_ref: str,
        resolution_code: str,
        resolution_notes: str,
    ) -> Incident:
        incident = self.get_incident(organization_id, incident_ref)
        resolution = Resolution(
            code=resolution_code,
            notes=resolution_notes,
            resolved_by=actor.id,
            resolved_by_name=actor.name,
        )
        return self._status_use_case.execute(incident, IncidentStatus.RESOLVED, actor, resolution=resolution)

    def add_worklog(
        self,
        organization_id: str,
        actor: User,
        incident_ref: str,
        minutes_spent: int,
        note: str,
        is_internal: bool = False,
    ) -> Worklog:
        incident = self.get_incident(organization_id, incident_ref)
        worklog = Worklog(
            log_id=short_token("WL"),
            by=actor.id,
            by_name=actor.name,
            minutes_spent=minutes_spent,
            note=note,
            is_internal=is_internal,
        )
        incident.add_worklog(worklog)
        incident.add_event(f"Worklog added ({minutes_spent} min)", actor.id, actor.name)
        self._incidents.update(incident)
        return worklog

    def escalate(self, organization_id: str, actor: User, incident_ref: str, reason: Optional[str] = None) -> Incident:
        """Raise the escalation level by one and tell the assignee."""
        incident = self.get_incident(organization_id, incident_ref)
        if incident.is_terminal():
            raise ValidationError(f"Cannot escalate a {incident.status} incident")
        level = incident.sla.escalation_level + 1
        incident.sla.escalation_level = level
        incident.add_event(f"Escalated to level {level}", actor.id, actor.name, {"reason": reason} if reason else None)
        updated = self._incidents.update(incident)

        if updated.assigned_to is not None and updated.assigned_to.technician_id != actor.id:
            self._notify.execute(
                user_id=updated.assigned_to.technician_id,
                type=NotificationType.INCIDENT_ESCALATED,
                title="Incident escalated",
                message=f"{updated.incident_id} escalated to level {level}",
                organization_id=organization_id,
                level=NotificationLevel.WARNING,
                entity_type="incident",
                entity_id=updated.id,
            )
        logger.info("Incident %s escalated to level %d by %s", updated.incident_id, level, actor.id)
        return updated

    def link_problem(self, organization_id: str, actor: User, incident_ref: str, problem_ref: str) -> Incident:
        incident = self.get_incident(organization_id, incident_ref)
        problem = self._find_problem(organization_id, problem_ref)

        incident.linked_problem_id = problem.problem_id
        incident.add_event(f"Linked to problem {problem.problem_id}", actor.id, actor.name)
        updated = self._incidents.update(incident)

        if problem.link_incident(incident.incident_id):
            problem.add_event(f"Incident {incident.incident_id} linked", actor.id, actor.name)
            self._problems.update(problem)
        return updated

    def add_comment(
        self,
        organization_id: str,
        actor: User,
        incident_ref: str,
        content: str,
        is_internal: bool = False,
    ) -> Incident:
        if not content or not content.strip():
            raise ValidationError("Comment cannot be empty")
        incident = self.get_incident(organization_id, incident_ref)
        incident.add_event(
            "Comment added", actor.id, actor.name,
            {"comment": content.strip(), "is_internal": is_internal},
        )
        return self._incidents.update(incident)

    def stats(self, organization_id: str) -> Dict[str, Any]:
        by_status = self._incidents.count_by(organization_id, "status")
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_priority": self._incidents.count_by(organization_id, "priority"),
            "open": sum(by_status.get(status, 0) for status in IncidentStatus.ACTIVE),
            "breached": self._incidents.count(organization_id, {"sla.breach_flag": True}),
            "major": self._incidents.count(
                organization_id, {"is_major": True, "status": list(IncidentStatus.ACTIVE)}
            ),
            "sla_compliance": sla_calculator.calculate_compliance(self._incidents.find_sla_records(organization_id)),
        }

    def _find_problem(self, organization_id: str, problem_ref: str) -> Problem:
        problem = self._problems.find_in_organization(organization_id, problem_ref)
        if problem is None:
            problem = self._problems.find_by_ticket_id(organization_id, problem_ref)
        if problem is None:
            raise NotFoundError.for_resource("Problem", problem_ref)
        return problem
