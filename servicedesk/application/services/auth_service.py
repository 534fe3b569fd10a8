"""
Auth Service
============

Registration, login, token refresh and password changes.
"""
import logging
from typing import Any, Dict, Optional

from servicedesk.core.errors import AuthenticationError, ValidationError
from servicedesk.core.security import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.organization_repository import OrganizationRepository
from servicedesk.domain.repositories.user_repository import UserRepository
from servicedesk.application.use_cases.auth.authenticate_user import AuthenticateUserUseCase
from servicedesk.application.use_cases.auth.register_user import RegisterUserUseCase

logger = logging.getLogger(__name__)


class AuthService:
    """
    Application service for authentication.

    Tokens carry the user id (`sub`), organization (`org`) and role; the
    user is re-read on every request so deactivation takes effect at once.
    """

    def __init__(self, user_repository: UserRepository, organization_repository: OrganizationRepository):
        self._users = user_repository
        self._register_use_case = RegisterUserUseCase(user_repository, organization_repository)
        self._authenticate_use_case = AuthenticateUserUseCase(user_repository)

    def register(
        self,
        email: str,
        name: str,
        password: str,
        organization_name: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Register a user and sign them in.

        Returns:
            Dict with the user and its access/refresh tokens
        """
        user = self._register_use_case.execute(
            email=email,
            name=name,
            password=password,
            organization_name=organization_name,
            department=department,
        )
        return {"user": user, **self.issue_tokens(user)}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self._authenticate_use_case.execute(email, password)
        logger.info("User logged in: %s", user.id)
        return {"user": user, **self.issue_tokens(user)}

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            AuthenticationError: If the token is not a valid refresh token
                or its user is gone or inactive
        """
        payload = decode_token(refresh_token, REFRESH_TOKEN)
        user = self._active_user(payload["sub"])
        return self.issue_tokens(user)

    def get_user_from_token(self, token: str) -> User:
        """Resolve the user of an access token."""
        payload = decode_token(token)
        return self._active_user(payload["sub"])

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Raises:
            ValidationError: If the current password does not match or the
                new one equals it
        """
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationError("New password must differ from the current password")
        user.set_password_hash(get_password_hash(new_password))
        self._users.update(user)
        logger.info("Password changed for user %s", user.id)

    @staticmethod
    def issue_tokens(user: User) -> Dict[str, str]:
        claims = {"sub": user.id, "org": user.organization_id, "role": user.role}
        return {
            "access_token": create_access_token(claims),
            "refresh_token": create_refresh_token(claims),
            "token_type": "bearer",
        }

    def _active_user(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")
        return user
