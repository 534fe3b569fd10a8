"""
Notification DTO
================
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel

from servicedesk.domain.models.notification import Notification


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    level: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    action_url: Optional[str] = None
    metadata: Dict[str, Any] = {}
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            level=notification.level,
            entity_type=notification.entity_type,
            entity_id=notification.entity_id,
            action_url=notification.action_url,
            metadata=notification.metadata,
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )
