"""
Accounts Infrastructure Repositories
====================================

SQLAlchemy implementation of the user repository.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.accounts.application.services import IUserRepository
from helpdesk.accounts.infrastructure.models import UserModel
from helpdesk.config import Role
from helpdesk.core import ValidationException
from helpdesk.infrastructure.database import is_storable_id


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation for users."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        """Get user by ID."""
        if not is_storable_id(user_id):
            return None
        return await self._session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        """Get user by email."""
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, name: str, email: str, password_hash: str, role: Role) -> UserModel:
        """
        Create new user.

        Raises:
            ValidationException: Email already taken (unique constraint)
        """
        model = UserModel(name=name, email=email, password=password_hash, role=role.value)

        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            # A concurrent registration won the race for this email
            raise ValidationException("Email already in use.") from exc

        return model

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
