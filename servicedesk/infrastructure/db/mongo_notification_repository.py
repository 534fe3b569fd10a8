"""
MongoDB Notification Repository
===============================
"""
from typing import List, Tuple

from servicedesk.domain.constants.fields import NotificationFields
from servicedesk.domain.models.notification import Notification
from servicedesk.domain.repositories.notification_repository import NotificationRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository
from servicedesk.utils.datetime_utils import ensure_aware, now


class MongoNotificationRepository(MongoBaseRepository[Notification], NotificationRepository):
    """MongoDB implementation of NotificationRepository."""

    def _to_entity(self, doc: dict) -> Notification:
        return Notification(
            id=doc[NotificationFields.ID],
            user_id=doc[NotificationFields.USER_ID],
            type=doc[NotificationFields.TYPE],
            title=doc[NotificationFields.TITLE],
            message=doc.get(NotificationFields.MESSAGE, ""),
            organization_id=doc.get(NotificationFields.ORGANIZATION_ID),
            level=doc.get(NotificationFields.LEVEL, "info"),
            entity_type=doc.get(NotificationFields.ENTITY_TYPE),
            entity_id=doc.get(NotificationFields.ENTITY_ID),
            action_url=doc.get(NotificationFields.ACTION_URL),
            metadata=doc.get(NotificationFields.METADATA) or {},
            is_read=doc.get(NotificationFields.IS_READ, False),
            read_at=ensure_aware(doc.get(NotificationFields.READ_AT)),
            created_at=ensure_aware(doc.get(NotificationFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(NotificationFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, notification: Notification) -> dict:
        return {
            NotificationFields.ID: notification.id,
            NotificationFields.USER_ID: notification.user_id,
            NotificationFields.TYPE: notification.type,
            NotificationFields.TITLE: notification.title,
            NotificationFields.MESSAGE: notification.message,
            NotificationFields.ORGANIZATION_ID: notification.organization_id,
            NotificationFields.LEVEL: notification.level,
            NotificationFields.ENTITY_TYPE: notification.entity_type,
            NotificationFields.ENTITY_ID: notification.entity_id,
            NotificationFields.ACTION_URL: notification.action_url,
            NotificationFields.METADATA: notification.metadata,
            NotificationFields.IS_READ: notification.is_read,
            NotificationFields.READ_AT: notification.read_at,
            NotificationFields.CREATED_AT: notification.created_at,
            NotificationFields.UPDATED_AT: notification.updated_at,
        }

    def find_for_user(self, user_id: str, unread_only: bool = False, page: int = 1, limit: int = 20) -> Tuple[List[Notification], int]:
        query = {NotificationFields.USER_ID: user_id}
        if unread_only:
            query[NotificationFields.IS_READ] = False
        return self._page(query, page, limit)

    def count_unread(self, user_id: str) -> int:
        return self._collection.count_documents({NotificationFields.USER_ID: user_id, NotificationFields.IS_READ: False})

    def mark_all_read(self, user_id: str) -> int:
        """Mark all unread notifications of a user read."""
        timestamp = now()
        result = self._collection.update_many(
            {NotificationFields.USER_ID: user_id, NotificationFields.IS_READ: False},
            {"$set": {
                NotificationFields.IS_READ: True,
                NotificationFields.READ_AT: timestamp,
                NotificationFields.UPDATED_AT: timestamp,
            }},
        )
        return result.modified_count
