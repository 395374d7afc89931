"""
Accounts Application Layer
==========================

Contains:
- Services: Registration and login
- DTOs: Data transfer objects for API serialization
"""

from helpdesk.accounts.application.dto import (
    RegisterRequest,
    LoginRequest,
    UserResponse,
    TokenResponse,
    UserNameInfo,
    UserContactInfo,
)
from helpdesk.accounts.application.services import AuthService, IUserRepository

__all__ = [
    # DTOs
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "TokenResponse",
    "UserNameInfo",
    "UserContactInfo",
    # Services
    "AuthService",
    # Repository Interfaces
    "IUserRepository",
]
