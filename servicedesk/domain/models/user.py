"""
User Model
==========

Domain model representing an account that can sign in.
This is a pure domain object with no infrastructure dependencies.
"""
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field

from servicedesk.domain.constants.people_constants import UserRole
from servicedesk.utils.datetime_utils import now


@dataclass
class User:
    """
    User domain model.

    `organization_id` is the tenant the user belongs to; `role` is the
    organization-wide role (project roles live on the project).
    """
    id: str
    email: str
    name: str
    password_hash: str
    organization_id: Optional[str] = None
    role: str = UserRole.USER
    department: Optional[str] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def is_manager(self) -> bool:
        """Admins and managers review leave and see every project."""
        return self.role in UserRole.MANAGERS

    def record_login(self) -> None:
        self.last_login_at = now()
        self.updated_at = now()

    def set_password_hash(self, password_hash: str) -> None:
        self.password_hash = password_hash
        self.updated_at = now()

    def join_organization(self, organization_id: str, role: str = UserRole.USER) -> None:
        self.organization_id = organization_id
        self.role = role
        self.updated_at = now()

    def leave_organization(self) -> None:
        self.organization_id = None
        self.role = UserRole.USER
        self.updated_at = now()
