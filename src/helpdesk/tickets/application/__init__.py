"""
Tickets Application Layer
=========================

Contains:
- Services: Ticket lifecycle and the update/audit engine
- DTOs: Data transfer objects for API serialization
"""

from helpdesk.tickets.application.dto import (
    TicketCreateRequest,
    TicketUpdateRequest,
    CommentCreateRequest,
    TicketResponse,
    TicketListItem,
    TicketListResponse,
    CommentResponse,
    TimelineEventResponse,
    TicketDetailResponse,
)
from helpdesk.tickets.application.services import ITicketRepository, TicketService

__all__ = [
    # DTOs
    "TicketCreateRequest",
    "TicketUpdateRequest",
    "CommentCreateRequest",
    "TicketResponse",
    "TicketListItem",
    "TicketListResponse",
    "CommentResponse",
    "TimelineEventResponse",
    "TicketDetailResponse",
    # Services
    "TicketService",
    # Repository Interfaces
    "ITicketRepository",
]
