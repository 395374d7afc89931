"""
Accounts Application DTOs
=========================

Pydantic models for the authentication API.
"""

from datetime import datetime

from pydantic import EmailStr, Field

from helpdesk.config import Role
from helpdesk.shared.api.schemas import CamelModel


# ========== Request DTOs ==========

class RegisterRequest(CamelModel):
    """Request model for user registration."""
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Login email, unique")
    password: str = Field(..., min_length=1, description="Plain-text password")


class LoginRequest(CamelModel):
    """Request model for login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


# ========== Response DTOs ==========

class UserResponse(CamelModel):
    """A user record without its password hash."""
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime


class TokenResponse(CamelModel):
    """Response model for a successful login."""
    token: str


class UserNameInfo(CamelModel):
    """Author/actor reference embedded in list rows, comments and events."""
    name: str


class UserContactInfo(CamelModel):
    """Creator/agent reference embedded in the ticket detail."""
    id: int
    name: str
    email: str
