"""
Leave Request Service
=====================

Application service for vacations, WFH days, sick leave, holidays and
blackout days.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from servicedesk.core.errors import AuthorizationError, NotFoundError, ValidationError
from servicedesk.domain.constants.people_constants import LeaveType
from servicedesk.domain.models.leave_request import LeaveRequest
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.base_repository import Filters
from servicedesk.domain.repositories.leave_request_repository import LeaveRequestRepository
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.domain.repositories.team_repository import TeamRepository
from servicedesk.application.use_cases.leave.review_leave_request import ReviewLeaveRequestUseCase
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class LeaveRequestService:
    """
    Application service for leave requests.

    Holidays and blackouts are calendar markers and are approved on
    creation; other types wait for review.
    """

    def __init__(
        self,
        leave_request_repository: LeaveRequestRepository,
        team_repository: TeamRepository,
        notification_repository: NotificationRepository,
    ):
        self._leave_requests = leave_request_repository
        self._teams = team_repository
        self._review_use_case = ReviewLeaveRequestUseCase(
            leave_request_repository,
            team_repository,
            SendNotificationUseCase(notification_repository),
        )

    def create(
        self,
        organization_id: str,
        user: User,
        team_id: str,
        type: str,
        start_date: datetime,
        end_date: datetime,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        """
        Raises:
            NotFoundError: If the team does not exist
            ValidationError: If the type is unknown or the range is reversed
        """
        if self._teams.find_in_organization(organization_id, team_id) is None:
            raise NotFoundError.for_resource("Team", team_id)
        self._validate(type, start_date, end_date)

        leave = LeaveRequest(
            id=new_id(),
            organization_id=organization_id,
            user_id=user.id,
            team_id=team_id,
            type=type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        if LeaveRequest.is_auto_approved_type(type):
            leave.approve(user.id)

        created = self._leave_requests.create(leave)
        logger.info("Leave request created: %s (%s, %s)", created.id, created.type, created.status)
        return created

    def get(self, organization_id: str, leave_id: str) -> LeaveRequest:
        leave = self._leave_requests.find_in_organization(organization_id, leave_id)
        if leave is None:
            raise NotFoundError.for_resource("Leave request", leave_id)
        return leave

    def update(
        self,
        organization_id: str,
        user: User,
        leave_id: str,
        type: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        leave = self._owned_pending(organization_id, user, leave_id)
        new_type = type or leave.type
        new_start = start_date or leave.start_date
        new_end = end_date or leave.end_date
        self._validate(new_type, new_start, new_end)

        leave.type = new_type
        leave.start_date = new_start
        leave.end_date = new_end
        if reason is not None:
            leave.reason = reason
        return self._leave_requests.update(leave)

    def delete(self, organization_id: str, user: User, leave_id: str) -> None:
        self._owned_pending(organization_id, user, leave_id)
        self._leave_requests.delete(leave_id)

    def approve(self, organization_id: str, reviewer: User, leave_id: str) -> LeaveRequest:
        return self._review_use_case.execute(self.get(organization_id, leave_id), reviewer, approve=True)

    def reject(self, organization_id: str, reviewer: User, leave_id: str, note: Optional[str] = None) -> LeaveRequest:
        return self._review_use_case.execute(self.get(organization_id, leave_id), reviewer, approve=False, note=note)

    def list_requests(
        self,
        organization_id: str,
        filters: Optional[Filters] = None,
        range_start: Optional[datetime] = None,
        range_end: Optional[datetime] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[LeaveRequest], int]:
        """
        List requests overlapping [range_start, range_end], ordered by start date.

        Args:
            filters: team_id, type, status and user_id equality filters
        """
        return self._leave_requests.find_overlapping(organization_id, range_start, range_end, filters, page, limit)

    def _owned_pending(self, organization_id: str, user: User, leave_id: str) -> LeaveRequest:
        leave = self.get(organization_id, leave_id)
        if leave.user_id != user.id:
            raise AuthorizationError("You can only change your own leave requests")
        if not leave.is_pending():
            raise ValidationError("Only pending leave requests can be changed")
        return leave

    @staticmethod
    def _validate(type: str, start_date: datetime, end_date: datetime) -> None:
        if type not in LeaveType.ALL:
            raise ValidationError(f"Invalid leave type '{type}'")
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
