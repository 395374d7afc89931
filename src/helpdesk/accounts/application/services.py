"""
Accounts Application Services
=============================

Registration and login, coordinating the user repository with password
hashing and token issuing.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from helpdesk.config import Role
from helpdesk.core import AuthenticationException, ValidationException
from helpdesk.shared.infrastructure.logging import get_logger
from helpdesk.shared.infrastructure.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IUserRepository(ABC):
    """Interface for user data access."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[Any]:
        """Get user by ID."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Any]:
        """Get user by email."""

    @abstractmethod
    async def create(self, name: str, email: str, password_hash: str, role: Role) -> Any:
        """Create new user."""

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current unit of work."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard the current unit of work."""


# ========== Application Services ==========

class AuthService:
    """
    Service for user registration and login.
    """

    def __init__(self, user_repository: IUserRepository):
        self._users = user_repository

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.USER
    ) -> Any:
        """
        Register a new user.

        Args:
            name: Display name
            email: Login email, must be unused
            password: Plain-text password, stored hashed
            role: USER for self-service sign-up; provisioning scripts pass AGENT/ADMIN

        Returns:
            The created user record

        Raises:
            ValidationException: Email already in use
        """
        if await self._users.get_by_email(email) is not None:
            raise ValidationException("Email already in use.")

        try:
            user = await self._users.create(name, email, hash_password(password), Role(role))
            await self._users.commit()
        except Exception:
            await self._users.rollback()
            raise

        logger.info("User registered", extra={"user_id": user.id, "role": Role(role).value})
        return user

    async def login(self, email: str, password: str) -> str:
        """
        Verify credentials and issue an access token.

        Raises:
            AuthenticationException: Unknown email or wrong password
        """
        user = await self._users.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.info("Login rejected", extra={"email": email})
            raise AuthenticationException("Invalid credentials.")

        return create_access_token(user.id, user.email, user.role)
