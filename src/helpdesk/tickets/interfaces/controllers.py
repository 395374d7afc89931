"""
Tickets Controllers (API Routes)
================================

FastAPI routes for tickets, comments and ticket updates.

Controllers are thin - they delegate to application services. The caller
arrives as an explicit RequestContext resolved from the bearer token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.accounts.domain import RequestContext
from helpdesk.accounts.infrastructure import SQLAlchemyUserRepository
from helpdesk.accounts.interfaces import get_request_context, require_roles
from helpdesk.config import Role, TicketStatus
from helpdesk.infrastructure.database import get_session
from helpdesk.tickets.application import (
    CommentCreateRequest,
    CommentResponse,
    TicketCreateRequest,
    TicketDetailResponse,
    TicketListResponse,
    TicketResponse,
    TicketService,
    TicketUpdateRequest,
)
from helpdesk.tickets.infrastructure import SQLAlchemyTicketRepository

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


# ========== Example payloads for Swagger ==========

TICKET_RESPONSE_EXAMPLE = {
    "id": 1,
    "title": "Cannot log in",
    "description": "The login page rejects my password since this morning.",
    "priority": "HIGH",
    "status": "IN_PROGRESS",
    "creatorId": 3,
    "agentId": 2,
    "slaDeadline": "2024-01-16T10:00:00Z",
    "version": 1,
    "createdAt": "2024-01-15T10:00:00Z",
    "updatedAt": "2024-01-15T10:20:00Z"
}

CONFLICT_EXAMPLE = {
    "error": "Conflict: This ticket has been updated by someone else. Please refresh and try again.",
    "correlationId": "7d0c6c0e-2f43-4b43-9c1e-0d4c3cb1a9f2"
}


# ========== Dependencies ==========

async def get_ticket_service(
    session: AsyncSession = Depends(get_session)
) -> TicketService:
    """Get ticket service instance."""
    return TicketService(
        SQLAlchemyTicketRepository(session),
        SQLAlchemyUserRepository(session),
    )


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a ticket",
    responses={
        201: {"content": {"application/json": {"example": {**TICKET_RESPONSE_EXAMPLE, "status": "OPEN", "agentId": None, "version": 0}}}},
        400: {"description": "Missing or invalid fields"},
        401: {"description": "Not authenticated"},
    },
)
async def create_ticket(
    request: TicketCreateRequest,
    context: RequestContext = Depends(get_request_context),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """
    Open a new ticket.

    The SLA deadline is fixed from the priority: HIGH 24h, MEDIUM 72h, LOW 120h.
    """
    return await ticket_service.create_ticket(
        title=request.title,
        description=request.description,
        priority=request.priority,
        creator_id=context.actor_id,
    )


@router.get(
    "",
    response_model=TicketListResponse,
    summary="List tickets",
)
async def list_tickets(
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    status_filter: Optional[TicketStatus] = Query(None, alias="status", description="Only this status"),
    q: Optional[str] = Query(None, description="Case-insensitive search in title and description"),
    context: RequestContext = Depends(get_request_context),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """List tickets, newest first, each flagged with ``isBreached``."""
    return await ticket_service.list_tickets(
        limit=limit,
        offset=offset,
        status=status_filter,
        search=q,
    )


@router.get(
    "/{ticket_id}",
    response_model=TicketDetailResponse,
    summary="Get ticket detail",
    responses={404: {"description": "Ticket not found"}},
)
async def get_ticket(
    ticket_id: int = Path(..., description="Ticket id"),
    context: RequestContext = Depends(get_request_context),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    return await ticket_service.get_ticket(ticket_id)


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment",
    responses={404: {"description": "Ticket not found"}},
)
async def add_comment(
    request: CommentCreateRequest,
    ticket_id: int = Path(..., description="Ticket id"),
    context: RequestContext = Depends(get_request_context),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    return await ticket_service.add_comment(
        ticket_id=ticket_id,
        content=request.content,
        author_id=context.actor_id,
    )


@router.patch(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Update status or assignment",
    responses={
        200: {"content": {"application/json": {"example": TICKET_RESPONSE_EXAMPLE}}},
        400: {"description": "Malformed version or unassignable agent"},
        403: {"description": "Caller is not an agent or admin"},
        404: {"description": "Ticket not found"},
        409: {"content": {"application/json": {"example": CONFLICT_EXAMPLE}}},
    },
)
async def update_ticket(
    request: TicketUpdateRequest,
    ticket_id: int = Path(..., description="Ticket id"),
    context: RequestContext = Depends(require_roles(Role.AGENT, Role.ADMIN)),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """
    Update a ticket's status and/or assigned agent.

    ``version`` must be the version last read. If someone else updated the
    ticket in the meantime the call fails with 409 and nothing is written.
    """
    return await ticket_service.apply_update(
        ticket_id=ticket_id,
        expected_version=request.version,
        patch=request.to_patch(),
        actor_id=context.actor_id,
    )


# Export router for inclusion in main app
tickets_router = router
