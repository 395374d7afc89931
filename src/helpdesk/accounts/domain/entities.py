"""
Accounts Domain Entities
========================

Pure Python domain objects for the accounts module.
"""

from dataclasses import dataclass

from helpdesk.config import Role


@dataclass(frozen=True)
class RequestContext:
    """
    The authenticated caller of a single request.

    Built from the bearer token by the interfaces layer and handed to every
    handler explicitly; there is no ambient "current user".
    """
    actor_id: int
    email: str
    role: Role

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles
