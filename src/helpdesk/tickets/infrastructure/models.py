"""
Tickets Infrastructure Models
=============================

SQLAlchemy ORM models for the tickets module.

A ticket owns its comments and timeline events (deleted with it). Users are
referenced, never owned.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpdesk.accounts.infrastructure.models import UserModel
from helpdesk.config import TicketStatus
from helpdesk.infrastructure.database import Base, UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TicketModel(Base):
    """
    Database model for tickets.

    Maps to the 'tickets' table. ``version`` is the optimistic-lock token:
    it starts at 0 and every accepted update bumps it by exactly one.
    """
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Enum values are stored as their plain string values
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TicketStatus.OPEN.value, index=True
    )

    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    agent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Fixed at creation from the priority
    sla_deadline: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    creator: Mapped[UserModel] = relationship(foreign_keys=[creator_id], lazy="raise")
    agent: Mapped[Optional[UserModel]] = relationship(foreign_keys=[agent_id], lazy="raise")

    comments: Mapped[List["CommentModel"]] = relationship(
        back_populates="ticket",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="(CommentModel.created_at, CommentModel.id)",
        lazy="raise",
    )
    timeline_events: Mapped[List["TimelineEventModel"]] = relationship(
        back_populates="ticket",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="(TimelineEventModel.created_at, TimelineEventModel.id)",
        lazy="raise",
    )


class CommentModel(Base):
    """
    Database model for ticket comments. Append-only.

    Maps to the 'comments' table.
    """
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    ticket_id: Mapped[int] = mapped_column(
        ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    author: Mapped[UserModel] = relationship(lazy="raise")
    ticket: Mapped[TicketModel] = relationship(back_populates="comments", lazy="raise")


class TimelineEventModel(Base):
    """
    Database model for the ticket audit trail. Append-only.

    Maps to the 'timeline_events' table.
    """
    __tablename__ = "timeline_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False)

    actor_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    ticket_id: Mapped[int] = mapped_column(
        ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    actor: Mapped[UserModel] = relationship(lazy="raise")
    ticket: Mapped[TicketModel] = relationship(back_populates="timeline_events", lazy="raise")
