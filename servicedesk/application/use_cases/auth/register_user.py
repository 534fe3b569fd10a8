"""
Register User Use Case
======================

Creates an account and, when an organization name is given, the
organization it administers.
"""
import logging
from typing import Optional

from servicedesk.core.errors import ConflictError
from servicedesk.core.security import get_password_hash
from servicedesk.domain.constants.people_constants import UserRole
from servicedesk.domain.models.organization import Organization, slugify
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.organization_repository import OrganizationRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.utils.id_utils import new_id, short_token

logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    """
    Use case for registering a user.

    A user registering with `organization_name` founds that organization
    and becomes its admin. Anyone else starts without an organization
    until an organization admin adds them.
    """

    def __init__(self, user_repository: UserRepository, organization_repository: OrganizationRepository):
        """
        Initialize use case with repositories.

        Args:
            user_repository: Repository for user persistence
            organization_repository: Repository for organization persistence
        """
        self._users = user_repository
        self._organizations = organization_repository

    def execute(
        self,
        email: str,
        name: str,
        password: str,
        organization_name: Optional[str] = None,
        department: Optional[str] = None,
    ) -> User:
        """
        Execute the register user use case.

        Args:
            email: Login email (unique)
            name: Display name
            password: Plain-text password, stored as a bcrypt hash
            organization_name: Name of a new organization to create
            department: Optional department

        Returns:
            Created user entity

        Raises:
            ConflictError: If the email is already registered
        """
        email = email.strip().lower()
        if self._users.find_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(
            id=new_id(),
            email=email,
            name=name.strip(),
            password_hash=get_password_hash(password),
            department=department,
        )

        if organization_name:
            organization = Organization(
                id=new_id(),
                name=organization_name.strip(),
                slug=self._unique_slug(organization_name),
                owner_id=user.id,
            )
            self._organizations.create(organization)
            user.organization_id = organization.id
            user.role = UserRole.ADMIN
            logger.info("Organization created: %s (%s)", organization.name, organization.id)

        created = self._users.create(user)
        logger.info("User registered: %s", created.id)
        return created

    def _unique_slug(self, name: str) -> str:
        slug = slugify(name)
        if self._organizations.find_by_slug(slug) is None:
            return slug
        return short_token(slug, 6)
