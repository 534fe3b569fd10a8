"""
User Repository Interface
=========================

Abstract interface for user data access.
"""
from abc import abstractmethod
from typing import List, Optional

from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.base_repository import Repository


class UserRepository(Repository[User]):
    """
    Abstract repository for user persistence operations.
    """

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """
        Find a user by email (case-insensitive).

        Args:
            email: Email address

        Returns:
            User entity if found, None otherwise
        """
        pass

    @abstractmethod
    def find_by_ids(self, user_ids: List[str]) -> List[User]:
        """Find every user whose id is in the list."""
        pass

    @abstractmethod
    def find_by_organization(self, organization_id: str) -> List[User]:
        """Find all users of an organization."""
        pass
