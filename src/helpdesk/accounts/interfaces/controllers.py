"""
Accounts Controllers (API Routes)
=================================

FastAPI routes for registration and login.

Controllers are thin - they delegate to application services.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.accounts.application import (
    AuthService,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from helpdesk.accounts.infrastructure import SQLAlchemyUserRepository
from helpdesk.infrastructure.database import get_session

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# ========== Dependencies ==========

async def get_auth_service(
    session: AsyncSession = Depends(get_session)
) -> AuthService:
    """Get auth service instance."""
    return AuthService(SQLAlchemyUserRepository(session))


# ========== Route Handlers ==========

@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={400: {"description": "Email already in use or invalid input"}},
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    user = await auth_service.register(request.name, request.email, request.password)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in and receive a bearer token",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    token = await auth_service.login(request.email, request.password)
    return TokenResponse(token=token)


# Export router for inclusion in main app
auth_router = router
