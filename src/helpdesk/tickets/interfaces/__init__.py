"""
Tickets Interfaces Layer
========================

Interface adapters for the tickets module:
- Controllers: FastAPI route handlers
"""

from helpdesk.tickets.interfaces.controllers import tickets_router

__all__ = ["tickets_router"]
