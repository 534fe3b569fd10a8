"""
Notification Service
====================

Application service for a user's in-app notifications.
"""
from typing import Any, List, Optional, Tuple

from servicedesk.core.errors import AuthorizationError, NotFoundError
from servicedesk.domain.models.notification import Notification
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.application.use_cases.notification.send_notification import SendNotificationUseCase


class NotificationService:
    """
    Application service for notifications.

    Other services create notifications through their own
    SendNotificationUseCase; this service serves the recipient's side.
    """

    def __init__(self, notification_repository: NotificationRepository):
        """
        Initialize service with repository.

        Args:
            notification_repository: Repository for notification persistence
        """
        self._repository = notification_repository
        self._send_use_case = SendNotificationUseCase(notification_repository)

    def notify(self, user_id: str, type: str, title: str, message: str, **kwargs: Any) -> Optional[Notification]:
        """Create a notification for one user (None when it could not be stored)."""
        return self._send_use_case.execute(user_id=user_id, type=type, title=title, message=message, **kwargs)

    def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Notification], int]:
        """
        List a user's notifications, newest first.

        Returns:
            Tuple of (notifications on the page, total count)
        """
        return self._repository.find_for_user(user_id, unread_only, page, limit)

    def unread_count(self, user_id: str) -> int:
        return self._repository.count_unread(user_id)

    def mark_read(self, user_id: str, notification_id: str) -> Notification:
        notification = self._get_owned(user_id, notification_id)
        if notification.is_read:
            return notification
        notification.mark_read()
        return self._repository.update(notification)

    def mark_all_read(self, user_id: str) -> int:
        """Returns the number of notifications marked read."""
        return self._repository.mark_all_read(user_id)

    def delete(self, user_id: str, notification_id: str) -> None:
        self._get_owned(user_id, notification_id)
        self._repository.delete(notification_id)

    def _get_owned(self, user_id: str, notification_id: str) -> Notification:
        notification = self._repository.find_by_id(notification_id)
        if notification is None:
            raise NotFoundError.for_resource("Notification", notification_id)
        if notification.user_id != user_id:
            raise AuthorizationError("You can only manage your own notifications")
        return notification
