"""
Send Notification Use Case
==========================

Creates in-app notifications on behalf of other use cases. A failure to
notify never fails the operation that triggered it.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from servicedesk.domain.constants.people_constants import NotificationLevel
from servicedesk.domain.models.notification import Notification
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class SendNotificationUseCase:
    """Use case for notifying one or more users."""

    def __init__(self, notification_repository: NotificationRepository):
        """
        Args:
            notification_repository: Repository for notification persistence
        """
        self._repository = notification_repository

    def execute(
        self,
        user_id: str,
        type: str,
        title: str,
        message: str,
        organization_id: Optional[str] = None,
        level: str = NotificationLevel.INFO,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Notification]:
        """
        Create a notification for one user.

        Returns:
            The stored notification, or None when storing it failed
        """
        notification = Notification(
            id=new_id(),
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            organization_id=organization_id,
            level=level,
            entity_type=entity_type,
            entity_id=entity_id,
            action_url=action_url,
            metadata=metadata or {},
        )
        try:
            return self._repository.create(notification)
        except Exception as exc:
            logger.warning("Failed to notify user %s (%s): %s", user_id, type, exc)
            return None

    def execute_many(self, user_ids: Iterable[str], exclude: Optional[str] = None, **kwargs: Any) -> List[Notification]:
        """Notify each distinct user once, skipping `exclude` (usually the actor)."""
        sent = []
        for user_id in dict.fromkeys(user_ids):
            if not user_id or user_id == exclude:
                continue
            notification = self.execute(user_id=user_id, **kwargs)
            if notification is not None:
                sent.append(notification)
        return sent
