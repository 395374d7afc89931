"""
Shared API
==========

Middleware, exception handlers and schema base classes used by every router.
"""
