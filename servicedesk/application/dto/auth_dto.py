"""
Auth DTO
========

Pydantic models for authentication, user and organization requests and responses.
"""
import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.people_constants import UserRole
from servicedesk.domain.models.organization import Organization
from servicedesk.domain.models.user import User

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _validate_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class RegisterRequest(BaseModel):
    """DTO for registering a user, optionally creating a new organization."""
    email: str
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    organization_name: Optional[str] = Field(None, min_length=2, max_length=100)
    department: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "email": "jane@example.com",
            "name": "Jane Doe",
            "password": "s3cure-passw0rd",
            "organization_name": "Acme IT",
        }
    })

    _email = field_validator("email")(_validate_email)


class LoginRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)

    _email = field_validator("email")(_validate_email)


class RefreshRequest(BaseModel):
    refresh_token: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)


class UserResponse(BaseModel):
    """DTO for user data. Never carries the password hash."""
    id: str
    email: str
    name: str
    organization_id: Optional[str] = None
    role: str
    department: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            organization_id=user.organization_id,
            role=user.role,
            department=user.department,
            is_active=user.is_active,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None


class OrganizationResponse(BaseModel):
    id: str
    name: str
    slug: str
    owner_id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, organization: Organization) -> "OrganizationResponse":
        return cls(
            id=organization.id,
            name=organization.name,
            slug=organization.slug,
            owner_id=organization.owner_id,
            is_active=organization.is_active,
            created_at=organization.created_at,
            updated_at=organization.updated_at,
        )


class OrganizationUpdateRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)


class OrganizationMemberRequest(BaseModel):
    """DTO for adding a registered user to the organization."""
    email: str
    role: str = Field(UserRole.USER, pattern=one_of(UserRole.ALL))

    _email = field_validator("email")(_validate_email)


class OrganizationMemberRoleRequest(BaseModel):
    role: str = Field(..., pattern=one_of(UserRole.ALL))
