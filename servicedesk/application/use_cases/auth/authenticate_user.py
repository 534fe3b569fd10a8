"""
Authenticate User Use Case
==========================
"""
from servicedesk.core.errors import AuthenticationError
from servicedesk.core.security import verify_password
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.user_repository import UserRepository


class AuthenticateUserUseCase:
    """Checks credentials and records the login."""

    def __init__(self, user_repository: UserRepository):
        self._users = user_repository

    def execute(self, email: str, password: str) -> User:
        """
        Raises:
            AuthenticationError: On unknown email, wrong password or a deactivated account
        """
        user = self._users.find_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        user.record_login()
        return self._users.update(user)
