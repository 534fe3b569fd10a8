"""
Change Service
==============

Application service for change requests and their CAB approval.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.itsm_constants import ChangeStatus, TicketPrefix
from servicedesk.domain.models.change import CabApproval, CabMember, Change, ChangeSchedule, is_cab_required
from servicedesk.domain.models.itsm_common import PersonRef, calculate_priority
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.application.use_cases.change.record_cab_decision import RecordCabDecisionUseCase
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)

# Plain fields a draft or rejected change may have edited
UPDATABLE_FIELDS = (
    "title", "description", "type", "priority", "impact", "risk", "risk_assessment",
    "implementation_plan", "rollback_plan", "test_plan", "communication_plan",
    "reason_for_change", "business_justification", "affected_services", "tags",
)


class ChangeService:
    """
    Application service for change operations.

    Changes are addressed by entity id or ticket id (CHG-YYYY-NNNNN).
    """

    def __init__(
        self,
        change_repository: ChangeRepository,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
        notification_repository: NotificationRepository,
    ):
        self._changes = change_repository
        self._users = user_repository
        self._ticket_ids = GenerateTicketIdUseCase(counter_repository)
        self._cab_use_case = RecordCabDecisionUseCase(
            change_repository, SendNotificationUseCase(notification_repository)
        )

    def create_change(
        self,
        organization_id: str,
        requester: User,
        title: str,
        description: str,
        impact: str,
        urgency: str,
        type: str,
        risk: str,
        priority: Optional[str] = None,
        schedule: Optional[Dict[str, Any]] = None,
        cab_members: Optional[List[Dict[str, Any]]] = None,
        linked_problems: Optional[List[str]] = None,
        linked_incidents: Optional[List[str]] = None,
        site_id: Optional[str] = None,
        **details: Any,
    ) -> Change:
        """
        Raise a change in draft.

        Args:
            details: Plans, risk assessment, affected services and tags

        Returns:
            Created change with its CAB requirement resolved
        """
        members = self._cab_members(organization_id, cab_members or [])
        change = Change(
            id=new_id(),
            change_id=self._ticket_ids.execute(TicketPrefix.CHANGE),
            organization_id=organization_id,
            type=type,
            title=title.strip(),
            description=description,
            priority=priority or calculate_priority(impact, urgency),
            impact=impact,
            risk=risk,
            requested_by=PersonRef.of(requester),
            cab_required=is_cab_required(type, risk),
            approval=CabApproval(required_approvers=max(len(members), 1), members=members),
            schedule=ChangeSchedule(**(schedule or {})),
            linked_problems=linked_problems or [],
            linked_incidents=linked_incidents or [],
            site_id=site_id,
            **{k: v for k, v in details.items() if k in UPDATABLE_FIELDS and v is not None},
        )
        change.add_event("Change created", requester.id, requester.name)
        created = self._changes.create(change)
        logger.info("Change created: %s type=%s risk=%s cab=%s", created.change_id, type, risk, created.cab_required)
        return created

    def list_changes(
        self,
        organization_id: str,
        status: Optional[str] = None,
        type: Optional[str] = None,
        risk: Optional[str] = None,
        priority: Optional[str] = None,
        requested_by: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Change], int]:
        filters = {
            "status": status,
            "type": type,
            "risk": risk,
            "priority": priority,
            "requested_by.id": requested_by,
        }
        return self._changes.find_page(organization_id, filters, page, limit, search)

    def get_change(self, organization_id: str, change_ref: str) -> Change:
        change = self._changes.find_in_organization(organization_id, change_ref)
        if change is None:
            change = self._changes.find_by_ticket_id(organization_id, change_ref)
        if change is None:
            raise NotFoundError.for_resource("Change", change_ref)
        return change

    def update_change(self, organization_id: str, actor: User, change_ref: str, changes: Dict[str, Any]) -> Change:
        """
        Edit a draft or rejected change. A rejected change returns to draft.

        Raises:
            ValidationError: If the change is past approval
        """
        change = self.get_change(organization_id, change_ref)
        if not change.is_editable():
            raise ValidationError(f"Change cannot be edited in status {change.status}")

        change.reopen_as_draft()
        for field in UPDATABLE_FIELDS:
            if field in changes:
                setattr(change, field, changes[field])
        if changes.get("schedule") is not None:
            change.schedule = ChangeSchedule(**changes["schedule"])
        if changes.get("cab_members") is not None:
            members = self._cab_members(organization_id, changes["cab_members"])
            change.approval = CabApproval(required_approvers=max(len(members), 1), members=members)
        change.cab_required = is_cab_required(change.type, change.risk)
        change.add_event("Change updated", actor.id, actor.name)
        return self._changes.update(change)

    def submit(self, organization_id: str, actor: User, change_ref: str) -> Change:
        change = self.get_change(organization_id, change_ref)
        if change.status != ChangeStatus.DRAFT:
            raise ValidationError("Only draft changes can be submitted")
        errors = change.submission_errors()
        if errors:
            raise ValidationError(
                f"Validation failed: {', '.join(errors)}",
                errors=[{"message": error} for error in errors],
            )
        change.submit(actor.id, actor.name)
        updated = self._changes.update(change)
        logger.info("Change submitted: %s -> %s", updated.change_id, updated.status)
        return updated

    def record_cab_decision(
        self,
        organization_id: str,
        voter: User,
        change_ref: str,
        decision: str,
        comments: Optional[str] = None,
    ) -> Change:
        return self._cab_use_case.execute(self.get_change(organization_id, change_ref), voter, decision, comments)

    def schedule(
        self,
        organization_id: str,
        actor: User,
        change_ref: str,
        planned_start: datetime,
        planned_end: datetime,
        maintenance_window: Optional[str] = None,
    ) -> Change:
        change = self.get_change(organization_id, change_ref)
        change.schedule_for(planned_start, planned_end, actor.id, actor.name, maintenance_window)
        return self._changes.update(change)

    def start_implementation(self, organization_id: str, actor: User, change_ref: str) -> Change:
        change = self.get_change(organization_id, change_ref)
        change.start_implementation(actor.id, actor.name)
        return self._changes.update(change)

    def complete(
        self,
        organization_id: str,
        actor: User,
        change_ref: str,
        success: bool = True,
        notes: Optional[str] = None,
    ) -> Change:
        change = self.get_change(organization_id, change_ref)
        change.complete(success, notes, actor.id, actor.name)
        updated = self._changes.update(change)
        logger.info("Change %s finished: %s", updated.change_id, updated.status)
        return updated

    def cancel(self, organization_id: str, actor: User, change_ref: str, reason: Optional[str] = None) -> Change:
        change = self.get_change(organization_id, change_ref)
        change.cancel(actor.id, actor.name, reason)
        return self._changes.update(change)

    def stats(self, organization_id: str) -> Dict[str, Any]:
        by_status = self._changes.count_by(organization_id, "status")
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_type": self._changes.count_by(organization_id, "type"),
            "by_risk": self._changes.count_by(organization_id, "risk"),
            "pending_cab": by_status.get(ChangeStatus.CAB_REVIEW, 0) + by_status.get(ChangeStatus.SUBMITTED, 0),
        }

    def _cab_members(self, organization_id: str, members: List[Dict[str, Any]]) -> List[CabMember]:
        """Resolve CAB members; names default to the user's name."""
        resolved = []
        for member in members:
            user = self._users.find_by_id(member["member_id"])
            if user is None or user.organization_id != organization_id:
                raise NotFoundError.for_resource("User", member["member_id"])
            resolved.append(
                CabMember(member_id=user.id, name=member.get("name") or user.name, role=member.get("role") or "member")
            )
        return resolved
