"""
Accounts Interfaces Layer
=========================

Interface adapters for the accounts module:
- Controllers: FastAPI route handlers
- Dependencies: request context and role gate used by other modules
"""

from helpdesk.accounts.interfaces.controllers import auth_router
from helpdesk.accounts.interfaces.dependencies import get_request_context, require_roles

__all__ = ["auth_router", "get_request_context", "require_roles"]
