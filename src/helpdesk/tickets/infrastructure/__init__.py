"""
Tickets Infrastructure Layer
============================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from helpdesk.tickets.infrastructure.models import CommentModel, TicketModel, TimelineEventModel
from helpdesk.tickets.infrastructure.repositories import SQLAlchemyTicketRepository

__all__ = [
    "TicketModel",
    "CommentModel",
    "TimelineEventModel",
    "SQLAlchemyTicketRepository",
]
