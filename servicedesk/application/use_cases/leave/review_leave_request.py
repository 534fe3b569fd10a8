"""
Review Leave Request Use Case
=============================
"""
import logging
from typing import Optional

from servicedesk.core.errors import AuthorizationError, ValidationError
from servicedesk.domain.constants.people_constants import NotificationType
from servicedesk.domain.models.leave_request import LeaveRequest
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.leave_request_repository import LeaveRequestRepository
from servicedesk.domain.repositories.team_repository import TeamRepository
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase

logger = logging.getLogger(__name__)


class ReviewLeaveRequestUseCase:
    """
    Use case for approving or rejecting a pending leave request.

    Organization managers and admins may review any request; team leaders
    may review requests of their team.
    """

    def __init__(
        self,
        leave_request_repository: LeaveRequestRepository,
        team_repository: TeamRepository,
        send_notification: SendNotificationUseCase,
    ):
        self._leave_requests = leave_request_repository
        self._teams = team_repository
        self._notify = send_notification

    def execute(self, leave: LeaveRequest, reviewer: User, approve: bool, note: Optional[str] = None) -> LeaveRequest:
        """
        Raises:
            ValidationError: If the request is no longer pending
            AuthorizationError: If the reviewer may not review this team's leave
        """
        if not leave.is_pending():
            raise ValidationError("Only pending leave requests can be reviewed")
        if not reviewer.is_manager():
            team = self._teams.find_in_organization(leave.organization_id, leave.team_id)
            if team is None or not team.is_leader(reviewer.id):
                raise AuthorizationError("Only managers or the team leader can review leave requests")

        if approve:
            leave.approve(reviewer.id)
        else:
            leave.reject(reviewer.id, note)
        updated = self._leave_requests.update(leave)

        self._notify.execute(
            user_id=updated.user_id,
            type=NotificationType.LEAVE_REVIEWED,
            title=f"Leave request {updated.status}",
            message=(
                f"Your {updated.type} request for {updated.start_date.date()} - "
                f"{updated.end_date.date()} was {updated.status}"
            ),
            organization_id=updated.organization_id,
            entity_type="leave_request",
            entity_id=updated.id,
        )
        logger.info("Leave request %s %s by %s", updated.id, updated.status, reviewer.id)
        return updated
