"""
Notification Model
==================

In-app notification addressed to one user.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from servicedesk.domain.constants.people_constants import NotificationLevel
from servicedesk.utils.datetime_utils import now


@dataclass
class Notification:
    id: str
    user_id: str
    type: str
    title: str
    message: str
    organization_id: Optional[str] = None
    level: str = NotificationLevel.INFO
    entity_type: Optional[str] = None  # "task" | "incident" | "sprint" | ...
    entity_id: Optional[str] = None
    action_url: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def mark_read(self) -> None:
        if self.is_read:
            return
        self.is_read = True
        self.read_at = now()
        self.updated_at = now()
