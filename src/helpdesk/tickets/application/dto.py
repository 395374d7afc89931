"""
Tickets Application DTOs
========================

Data Transfer Objects for the tickets API.

Field names are snake_case in Python and camelCase on the wire
(``creatorId``, ``slaDeadline``, ``isBreached``, ``timelineEvents``, ...).
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, StrictInt

from helpdesk.accounts.application.dto import UserContactInfo, UserNameInfo
from helpdesk.config import Priority, TicketStatus, TimelineAction
from helpdesk.shared.api.schemas import CamelModel
from helpdesk.tickets.domain import UNSET, TicketPatch


# ========== Request DTOs ==========

class TicketCreateRequest(CamelModel):
    """Request model for creating a ticket."""
    title: str = Field(..., min_length=1, max_length=255, description="Short summary")
    description: str = Field(..., min_length=1, description="Full problem description")
    priority: Priority = Field(..., description="LOW, MEDIUM or HIGH")


class TicketUpdateRequest(CamelModel):
    """
    Request model for updating a ticket.

    ``version`` must be the version the client last read. Omitted fields are
    left untouched; ``agentId: null`` unassigns the ticket.
    """
    status: Optional[TicketStatus] = Field(None, description="New status")
    agent_id: Optional[int] = Field(None, description="Assigned agent user id")
    version: StrictInt = Field(..., description="Version the client last read")

    def to_patch(self) -> TicketPatch:
        return TicketPatch(
            status=self.status,
            agent_id=self.agent_id if "agent_id" in self.model_fields_set else UNSET,
        )


class CommentCreateRequest(CamelModel):
    """Request model for adding a comment."""
    content: str = Field(..., min_length=1, description="Comment text")


# ========== Response DTOs ==========

class TicketResponse(CamelModel):
    """The full ticket record."""
    id: int
    title: str
    description: str
    priority: Priority
    status: TicketStatus
    creator_id: int
    agent_id: Optional[int] = None
    sla_deadline: datetime
    version: int
    created_at: datetime
    updated_at: datetime


class TicketListItem(TicketResponse):
    """A ticket row in the list view."""
    creator: UserNameInfo
    is_breached: bool

    @classmethod
    def from_model(cls, model: Any, is_breached: bool) -> "TicketListItem":
        return cls(
            **TicketResponse.model_validate(model).model_dump(),
            creator=UserNameInfo.model_validate(model.creator),
            is_breached=is_breached,
        )


class TicketListResponse(CamelModel):
    """Paginated ticket list."""
    data: List[TicketListItem]
    total: int
    page: int
    total_pages: int


class CommentResponse(CamelModel):
    """A comment with its author's name."""
    id: int
    content: str
    author_id: int
    ticket_id: int
    created_at: datetime
    author: UserNameInfo


class TimelineEventResponse(CamelModel):
    """An audit trail entry with its actor's name."""
    id: int
    action: TimelineAction
    details: str
    actor_id: int
    ticket_id: int
    created_at: datetime
    actor: UserNameInfo


class TicketDetailResponse(TicketResponse):
    """A ticket with its people, comments and timeline."""
    creator: UserContactInfo
    agent: Optional[UserContactInfo] = None
    comments: List[CommentResponse] = Field(default_factory=list)
    timeline_events: List[TimelineEventResponse] = Field(default_factory=list)
    is_breached: bool

    @classmethod
    def from_model(cls, model: Any, is_breached: bool) -> "TicketDetailResponse":
        return cls(
            **TicketResponse.model_validate(model).model_dump(),
            creator=UserContactInfo.model_validate(model.creator),
            agent=UserContactInfo.model_validate(model.agent) if model.agent else None,
            comments=[CommentResponse.model_validate(c) for c in model.comments],
            timeline_events=[TimelineEventResponse.model_validate(e) for e in model.timeline_events],
            is_breached=is_breached,
        )
