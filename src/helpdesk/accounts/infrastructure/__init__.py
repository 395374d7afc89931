"""
Accounts Infrastructure Layer
=============================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from helpdesk.accounts.infrastructure.models import UserModel
from helpdesk.accounts.infrastructure.repositories import SQLAlchemyUserRepository

__all__ = [
    "UserModel",
    "SQLAlchemyUserRepository",
]
