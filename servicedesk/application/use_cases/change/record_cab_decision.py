"""
Record CAB Decision Use Case
============================
"""
import logging
from typing import Optional

from servicedesk.core.errors import AuthorizationError
from servicedesk.domain.constants.itsm_constants import ApprovalStatus
from servicedesk.domain.constants.people_constants import NotificationType
from servicedesk.domain.models.change import Change
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase

logger = logging.getLogger(__name__)


class RecordCabDecisionUseCase:
    """
    Use case for a CAB member's approve/reject vote.

    When CAB members are listed on the change only they (or an
    organization admin) may vote. The requester is notified once the
    change is approved or rejected.
    """

    def __init__(self, change_repository: ChangeRepository, send_notification: SendNotificationUseCase):
        self._changes = change_repository
        self._notify = send_notification

    def execute(self, change: Change, voter: User, decision: str, comments: Optional[str] = None) -> Change:
        """
        Raises:
            AuthorizationError: If the voter is not a listed CAB member
            ValidationError: If the change is not awaiting CAB approval
        """
        listed = {m.member_id: m for m in change.approval.members}
        if listed and voter.id not in listed and not voter.is_admin():
            raise AuthorizationError("Only CAB members of this change can vote")

        role = listed[voter.id].role if voter.id in listed else "member"
        cab_status = change.record_cab_decision(voter.id, voter.name, decision, comments, role)
        updated = self._changes.update(change)

        if cab_status != ApprovalStatus.PENDING:
            self._notify.execute(
                user_id=updated.requested_by.id,
                type=NotificationType.CHANGE_DECISION,
                title=f"Change {cab_status}",
                message=f"{updated.change_id}: {updated.title} was {cab_status} by the CAB",
                organization_id=updated.organization_id,
                entity_type="change",
                entity_id=updated.id,
            )
            logger.info("Change %s %s by CAB", updated.change_id, cab_status)
        return updated
