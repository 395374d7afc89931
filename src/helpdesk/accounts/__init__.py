"""
Accounts Module
===============

Bounded Context for users and request authentication.

Responsibilities:
- Register users with hashed passwords (role USER by default)
- Issue signed bearer tokens on login
- Resolve the caller of every request into an explicit RequestContext
- Gate operations by role
"""

__version__ = "1.0.0"
