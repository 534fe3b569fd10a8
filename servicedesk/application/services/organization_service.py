"""
Organization Service
====================
"""
import logging
from typing import List

from servicedesk.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from servicedesk.domain.constants.people_constants import UserRole
from servicedesk.domain.models.organization import Organization
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.organization_repository import OrganizationRepository
from servicedesk.domain.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class OrganizationService:
    """
    Application service for the tenant record and its users.

    Only organization admins change membership. A user belongs to at most
    one organization, so adding someone who already belongs elsewhere is
    refused.
    """

    def __init__(self, organization_repository: OrganizationRepository, user_repository: UserRepository):
        self._organizations = organization_repository
        self._users = user_repository

    def get(self, organization_id: str) -> Organization:
        organization = self._organizations.find_by_id(organization_id)
        if organization is None:
            raise NotFoundError.for_resource("Organization", organization_id)
        return organization

    def rename(self, organization_id: str, actor: User, name: str) -> Organization:
        """
        Raises:
            AuthorizationError: If the actor is not an admin
        """
        self._require_admin(actor, "Only admins can update the organization")
        organization = self.get(organization_id)
        organization.rename(name)
        updated = self._organizations.update(organization)
        logger.info("Organization %s renamed to %s", organization_id, updated.name)
        return updated

    def list_members(self, organization_id: str) -> List[User]:
        return self._users.find_by_organization(organization_id)

    def add_member(self, organization_id: str, actor: User, email: str, role: str = UserRole.USER) -> User:
        """
        Add a registered user to the organization.

        Raises:
            AuthorizationError: If the actor is not an admin
            NotFoundError: If no account uses the email
            ConflictError: If the user is already a member
            ValidationError: If the user belongs to another organization
        """
        self._require_admin(actor, "Only admins can add organization members")
        user = self._users.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found. They must register first.")
        if user.organization_id == organization_id:
            raise ConflictError("User is already a member of this organization")
        if user.organization_id:
            raise ValidationError("User already belongs to another organization")

        user.join_organization(organization_id, role)
        updated = self._users.update(user)
        logger.info("User %s added to organization %s as %s", updated.id, organization_id, role)
        return updated

    def update_member_role(self, organization_id: str, actor: User, user_id: str, role: str) -> User:
        self._require_admin(actor, "Only admins can change member roles")
        user = self._member(organization_id, user_id)
        if user.id == actor.id and role != UserRole.ADMIN:
            raise ValidationError("You cannot change your own admin role")
        user.join_organization(organization_id, role)
        return self._users.update(user)

    def remove_member(self, organization_id: str, actor: User, user_id: str) -> None:
        self._require_admin(actor, "Only admins can remove organization members")
        if user_id == actor.id:
            raise ValidationError("Cannot remove yourself")
        user = self._member(organization_id, user_id)
        user.leave_organization()
        self._users.update(user)
        logger.info("User %s removed from organization %s", user_id, organization_id)

    def _member(self, organization_id: str, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None or user.organization_id != organization_id:
            raise NotFoundError.for_resource("Member", user_id)
        return user

    @staticmethod
    def _require_admin(actor: User, message: str) -> None:
        if not actor.is_admin():
            raise AuthorizationError(message)
