"""
MongoDB User Repository
=======================

Concrete implementation of UserRepository using MongoDB.
"""
from typing import List, Optional

from servicedesk.domain.constants.fields import UserFields
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository
from servicedesk.utils.datetime_utils import ensure_aware, now


class MongoUserRepository(MongoBaseRepository[User], UserRepository):
    """
    MongoDB implementation of UserRepository.

    Emails are stored lower-cased.
    """

    def _to_entity(self, doc: dict) -> User:
        """Convert MongoDB document to User entity."""
        return User(
            id=doc[UserFields.ID],
            email=doc[UserFields.EMAIL],
            name=doc.get(UserFields.NAME, ""),
            password_hash=doc.get(UserFields.PASSWORD_HASH, ""),
            organization_id=doc.get(UserFields.ORGANIZATION_ID),
            role=doc.get(UserFields.ROLE, "user"),
            department=doc.get(UserFields.DEPARTMENT),
            is_active=doc.get(UserFields.IS_ACTIVE, True),
            last_login_at=ensure_aware(doc.get(UserFields.LAST_LOGIN_AT)),
            created_at=ensure_aware(doc.get(UserFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(UserFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, user: User) -> dict:
        """Convert User entity to MongoDB document."""
        return {
            UserFields.ID: user.id,
            UserFields.EMAIL: user.email.strip().lower(),
            UserFields.NAME: user.name,
            UserFields.PASSWORD_HASH: user.password_hash,
            UserFields.ORGANIZATION_ID: user.organization_id,
            UserFields.ROLE: user.role,
            UserFields.DEPARTMENT: user.department,
            UserFields.IS_ACTIVE: user.is_active,
            UserFields.LAST_LOGIN_AT: user.last_login_at,
            UserFields.CREATED_AT: user.created_at,
            UserFields.UPDATED_AT: user.updated_at,
        }

    def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by email."""
        return self._find_one({UserFields.EMAIL: (email or "").strip().lower()})

    def find_by_ids(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        return self._find({UserFields.ID: {"$in": list(user_ids)}})

    def find_by_organization(self, organization_id: str) -> List[User]:
        return self._find({UserFields.ORGANIZATION_ID: organization_id}, sort=[(UserFields.NAME, 1)])
