"""
Tickets Application Services
============================

Application services orchestrate business logic and coordinate between
domain rules and repositories.

``TicketService.apply_update`` is the update/audit engine: one optimistic,
version-checked transaction that writes the ticket and, when the status
actually changes, its STATUS_CHANGED timeline entry. Either both land or
neither does.
"""

import math
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence, Tuple

from helpdesk.accounts.application.services import IUserRepository
from helpdesk.config import (
    TICKET_MANAGER_ROLES,
    Priority,
    Role,
    TicketStatus,
    TimelineAction,
)
from helpdesk.core import (
    ConcurrencyConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from helpdesk.shared.infrastructure.logging import get_logger
from helpdesk.sla.domain import SLACalculator
from helpdesk.tickets.application.dto import (
    CommentResponse,
    TicketDetailResponse,
    TicketListItem,
    TicketListResponse,
    TicketResponse,
)
from helpdesk.tickets.domain import (
    TicketPatch,
    is_well_formed_version,
    status_changed_details,
    ticket_created_details,
)

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ========== Repository Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Optional[Any]:
        """Get ticket by ID."""

    @abstractmethod
    async def get_detail(self, ticket_id: int) -> Optional[Any]:
        """Get ticket with creator, agent, comments and timeline."""

    @abstractmethod
    async def exists(self, ticket_id: int) -> bool:
        """Check if ticket exists."""

    @abstractmethod
    async def create(
        self,
        title: str,
        description: str,
        priority: Priority,
        creator_id: int,
        sla_deadline: datetime,
        created_at: datetime
    ) -> Any:
        """Create new ticket."""

    @abstractmethod
    async def compare_and_swap(
        self,
        ticket_id: int,
        expected_version: int,
        status: TicketStatus,
        agent_id: Optional[int],
        updated_at: datetime
    ) -> bool:
        """Conditionally write the ticket and bump its version."""

    @abstractmethod
    async def add_timeline_event(
        self,
        ticket_id: int,
        action: TimelineAction,
        details: str,
        actor_id: int,
        created_at: datetime
    ) -> Any:
        """Append an audit trail entry."""

    @abstractmethod
    async def add_comment(
        self,
        ticket_id: int,
        author_id: int,
        content: str,
        created_at: datetime
    ) -> Any:
        """Append a comment."""

    @abstractmethod
    async def list(
        self,
        status: Optional[TicketStatus] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> Tuple[Sequence[Any], int]:
        """List tickets with filters."""

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current unit of work."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard the current unit of work."""


# ========== Application Services ==========

class TicketService:
    """
    Service for the ticket lifecycle.

    Coordinates SLA rules, the ticket store and the audit trail. Every
    mutating method is one unit of work: it commits on success and rolls
    back on any failure.
    """

    def __init__(
        self,
        ticket_repository: ITicketRepository,
        user_repository: IUserRepository,
        clock: Callable[[], datetime] = utc_now
    ):
        self._tickets = ticket_repository
        self._users = user_repository
        self._clock = clock

    async def create_ticket(
        self,
        title: str,
        description: str,
        priority: Priority,
        creator_id: int
    ) -> TicketResponse:
        """
        Create a ticket at version 0 with its SLA deadline and a
        TICKET_CREATED timeline entry.
        """
        try:
            priority = Priority(priority)
        except ValueError:
            raise ValidationException(f"Invalid priority: {priority}")

        now = self._clock()
        deadline = SLACalculator.compute_deadline(priority, now)

        try:
            ticket = await self._tickets.create(
                title=title,
                description=description,
                priority=priority,
                creator_id=creator_id,
                sla_deadline=deadline,
                created_at=now,
            )
            await self._tickets.add_timeline_event(
                ticket_id=ticket.id,
                action=TimelineAction.TICKET_CREATED,
                details=ticket_created_details(priority),
                actor_id=creator_id,
                created_at=now,
            )
            await self._tickets.commit()
        except Exception:
            await self._tickets.rollback()
            raise

        logger.info(
            "Ticket created",
            extra={
                "ticket_id": ticket.id,
                "priority": priority.value,
                "sla_deadline": deadline.isoformat(),
                "creator_id": creator_id,
            }
        )
        return TicketResponse.model_validate(ticket)

    async def apply_update(
        self,
        ticket_id: int,
        expected_version: Any,
        patch: TicketPatch,
        actor_id: int
    ) -> TicketResponse:
        """
        Apply a status/assignment patch under optimistic locking.

        Args:
            ticket_id: Ticket to update
            expected_version: Version the caller last read
            patch: Fields to change; absent fields keep their value
            actor_id: Caller, recorded on the timeline entry

        Returns:
            The ticket as stored after the update (version + 1)

        Raises:
            ValidationException: Malformed version, or unassignable agent
            ResourceNotFoundException: No such ticket
            ConcurrencyConflictException: Stored version differs from expected_version
        """
        if not is_well_formed_version(expected_version):
            raise ValidationException("Invalid version number provided for update.")

        now = self._clock()

        try:
            current = await self._tickets.get_by_id(ticket_id)
            if current is None:
                raise ResourceNotFoundException("Ticket", str(ticket_id))
            if current.version != expected_version:
                raise ConcurrencyConflictException("Ticket", str(ticket_id), expected_version)

            prior_status = TicketStatus(current.status)
            new_status, new_agent_id = patch.apply(prior_status, current.agent_id)

            if patch.changes_agent and new_agent_id is not None:
                await self._ensure_assignable(new_agent_id)

            swapped = await self._tickets.compare_and_swap(
                ticket_id=ticket_id,
                expected_version=expected_version,
                status=new_status,
                agent_id=new_agent_id,
                updated_at=now,
            )
            if not swapped:
                # Another writer committed between our read and our write
                raise ConcurrencyConflictException("Ticket", str(ticket_id), expected_version)

            if new_status != prior_status:
                await self._tickets.add_timeline_event(
                    ticket_id=ticket_id,
                    action=TimelineAction.STATUS_CHANGED,
                    details=status_changed_details(prior_status, new_status),
                    actor_id=actor_id,
                    created_at=now,
                )

            updated = await self._tickets.get_by_id(ticket_id)
            await self._tickets.commit()
        except ConcurrencyConflictException:
            await self._tickets.rollback()
            logger.warning(
                "Ticket update conflict",
                extra={
                    "ticket_id": ticket_id,
                    "expected_version": expected_version,
                    "actor_id": actor_id,
                }
            )
            raise
        except Exception:
            await self._tickets.rollback()
            raise

        logger.info(
            "Ticket updated",
            extra={
                "ticket_id": ticket_id,
                "version": updated.version,
                "status_changed": new_status != prior_status,
                "actor_id": actor_id,
            }
        )
        return TicketResponse.model_validate(updated)

    async def add_comment(self, ticket_id: int, content: str, author_id: int) -> CommentResponse:
        """Append a comment to an existing ticket."""
        if not content or not content.strip():
            raise ValidationException("Comment content is required.")

        try:
            if not await self._tickets.exists(ticket_id):
                raise ResourceNotFoundException("Ticket", str(ticket_id))

            comment = await self._tickets.add_comment(
                ticket_id=ticket_id,
                author_id=author_id,
                content=content,
                created_at=self._clock(),
            )
            await self._tickets.commit()
        except Exception:
            await self._tickets.rollback()
            raise

        return CommentResponse.model_validate(comment)

    async def get_ticket(self, ticket_id: int) -> TicketDetailResponse:
        """Read one ticket with its people, comments, timeline and breach flag."""
        ticket = await self._tickets.get_detail(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", str(ticket_id))

        return TicketDetailResponse.from_model(
            ticket, SLACalculator.is_breached(ticket, self._clock())
        )

    async def list_tickets(
        self,
        limit: int = 10,
        offset: int = 0,
        status: Optional[TicketStatus] = None,
        search: Optional[str] = None
    ) -> TicketListResponse:
        """
        List tickets newest first, each annotated with its breach flag.

        ``page`` is derived from offset and limit the way the web client
        pages: ``offset // limit + 1``.
        """
        if limit < 1:
            raise ValidationException("limit must be at least 1")
        if offset < 0:
            raise ValidationException("offset must not be negative")

        tickets, total = await self._tickets.list(
            status=status, search=search, limit=limit, offset=offset
        )

        now = self._clock()
        items: List[TicketListItem] = [
            TicketListItem.from_model(ticket, SLACalculator.is_breached(ticket, now))
            for ticket in tickets
        ]

        return TicketListResponse(
            data=items,
            total=total,
            page=offset // limit + 1,
            total_pages=math.ceil(total / limit),
        )

    async def _ensure_assignable(self, agent_id: int) -> None:
        agent = await self._users.get_by_id(agent_id)
        if agent is None:
            raise ValidationException(f"Agent {agent_id} not found.")
        if Role(agent.role) not in TICKET_MANAGER_ROLES:
            raise ValidationException(f"User {agent_id} cannot be assigned tickets.")
