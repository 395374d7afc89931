"""
Accounts Request Dependencies
=============================

FastAPI dependencies that turn the bearer token into a RequestContext and
gate routes by role.
"""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from helpdesk.accounts.domain import RequestContext
from helpdesk.config import Role
from helpdesk.core import AuthenticationException, PermissionDeniedException
from helpdesk.shared.infrastructure.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_request_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> RequestContext:
    """Resolve the caller from the ``Authorization: Bearer`` header."""
    if credentials is None:
        raise AuthenticationException("Authentication required.")

    claims = decode_access_token(credentials.credentials)
    try:
        return RequestContext(
            actor_id=int(claims["userId"]),
            email=str(claims["email"]),
            role=Role(claims["role"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationException("Invalid or expired token.") from exc


def require_roles(*roles: Role) -> Callable:
    """
    Build a dependency that admits only callers holding one of ``roles``.

    Usage:
        @router.patch("/{ticket_id}")
        async def update(context: RequestContext = Depends(require_roles(Role.AGENT, Role.ADMIN))):
            ...
    """

    async def checker(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not context.has_role(*roles):
            raise PermissionDeniedException("You do not have permission to perform this action.")
        return context

    return checker
