"""
Tickets Infrastructure Repositories
===================================

SQLAlchemy implementation of the ticket repository.

The version check that guards every update is expressed as one conditional
statement (``UPDATE ... WHERE id = :id AND version = :expected``), so a lost
update is detected by the database itself regardless of isolation level.
"""

from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from helpdesk.config import Priority, TicketStatus, TimelineAction
from helpdesk.infrastructure.database import is_storable_id
from helpdesk.tickets.application.services import ITicketRepository
from helpdesk.tickets.infrastructure.models import CommentModel, TicketModel, TimelineEventModel


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of ticket repository.

    Handles persistence of tickets, comments and timeline events using
    async SQLAlchemy. All calls share the session's transaction.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, ticket_id: int) -> Optional[TicketModel]:
        """Get ticket by ID, always reading the stored row."""
        if not is_storable_id(ticket_id):
            return None

        stmt = (
            select(TicketModel)
            .where(TicketModel.id == ticket_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_detail(self, ticket_id: int) -> Optional[TicketModel]:
        """Get ticket with creator, agent, comments and timeline loaded."""
        if not is_storable_id(ticket_id):
            return None

        stmt = (
            select(TicketModel)
            .where(TicketModel.id == ticket_id)
            .options(
                selectinload(TicketModel.creator),
                selectinload(TicketModel.agent),
                selectinload(TicketModel.comments).selectinload(CommentModel.author),
                selectinload(TicketModel.timeline_events).selectinload(TimelineEventModel.actor),
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, ticket_id: int) -> bool:
        """Check if ticket exists."""
        if not is_storable_id(ticket_id):
            return False

        stmt = select(TicketModel.id).where(TicketModel.id == ticket_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(
        self,
        title: str,
        description: str,
        priority: Priority,
        creator_id: int,
        sla_deadline: datetime,
        created_at: datetime
    ) -> TicketModel:
        """Create new ticket at version 0 in status OPEN."""
        model = TicketModel(
            title=title,
            description=description,
            priority=Priority(priority).value,
            status=TicketStatus.OPEN.value,
            creator_id=creator_id,
            agent_id=None,
            sla_deadline=sla_deadline,
            version=0,
            created_at=created_at,
            updated_at=created_at,
        )

        self._session.add(model)
        await self._session.flush()

        return model

    async def compare_and_swap(
        self,
        ticket_id: int,
        expected_version: int,
        status: TicketStatus,
        agent_id: Optional[int],
        updated_at: datetime
    ) -> bool:
        """
        Write status/agent and bump the version iff the stored version still
        equals ``expected_version``.

        Returns:
            True when exactly one row was updated
        """
        stmt = (
            update(TicketModel)
            .where(TicketModel.id == ticket_id, TicketModel.version == expected_version)
            .values(
                status=TicketStatus(status).value,
                agent_id=agent_id,
                version=TicketModel.version + 1,
                updated_at=updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def add_timeline_event(
        self,
        ticket_id: int,
        action: TimelineAction,
        details: str,
        actor_id: int,
        created_at: datetime
    ) -> TimelineEventModel:
        """Append an audit trail entry."""
        model = TimelineEventModel(
            action=TimelineAction(action).value,
            details=details,
            actor_id=actor_id,
            ticket_id=ticket_id,
            created_at=created_at,
        )

        self._session.add(model)
        await self._session.flush()

        return model

    async def add_comment(
        self,
        ticket_id: int,
        author_id: int,
        content: str,
        created_at: datetime
    ) -> CommentModel:
        """Append a comment and return it with its author loaded."""
        model = CommentModel(
            content=content,
            author_id=author_id,
            ticket_id=ticket_id,
            created_at=created_at,
        )

        self._session.add(model)
        await self._session.flush()

        stmt = (
            select(CommentModel)
            .where(CommentModel.id == model.id)
            .options(selectinload(CommentModel.author))
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def list(
        self,
        status: Optional[TicketStatus] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> Tuple[Sequence[TicketModel], int]:
        """
        List tickets newest first, with the creator loaded.

        Returns:
            (page of tickets, total number of matching tickets)
        """
        conditions: List[Any] = []
        if status is not None:
            conditions.append(TicketModel.status == TicketStatus(status).value)
        if search:
            conditions.append(or_(
                TicketModel.title.icontains(search, autoescape=True),
                TicketModel.description.icontains(search, autoescape=True),
            ))

        count_stmt = select(func.count()).select_from(TicketModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            select(TicketModel)
            .where(*conditions)
            .options(selectinload(TicketModel.creator))
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all(), total

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
