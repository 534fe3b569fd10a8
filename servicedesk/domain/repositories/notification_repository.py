"""
Notification Repository Interface
=================================
"""
from abc import abstractmethod
from typing import List, Tuple

from servicedesk.domain.models.notification import Notification
from servicedesk.domain.repositories.base_repository import Repository


class NotificationRepository(Repository[Notification]):

    @abstractmethod
    def find_for_user(self, user_id: str, unread_only: bool = False, page: int = 1, limit: int = 20) -> Tuple[List[Notification], int]:
        """
        List a user's notifications, newest first.

        Args:
            user_id: Recipient
            unread_only: Only unread notifications
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (notifications, total count)
        """
        pass

    @abstractmethod
    def count_unread(self, user_id: str) -> int:
        pass

    @abstractmethod
    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of a user read. Returns the number updated."""
        pass
