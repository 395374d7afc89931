"""
Accounts Domain Layer
=====================

Contains:
- Entities: RequestContext (the authenticated caller of one request)
"""

from helpdesk.accounts.domain.entities import RequestContext

__all__ = ["RequestContext"]
