from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.config import Priority, TicketStatus
from helpdesk.sla.domain import DEFAULT_SLA_HOURS, SLACalculator, compute_deadline, is_breached

CREATED = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


@dataclass
class _Ticket:
    status: str
    sla_deadline: datetime


@pytest.mark.parametrize(
    "priority, hours",
    [
        (Priority.HIGH, 24),
        (Priority.MEDIUM, 72),
        (Priority.LOW, 120),
        ("HIGH", 24),
        ("URGENT", 120),
        (None, 120),
    ],
)
def test_deadline_follows_priority(priority, hours) -> None:
    assert compute_deadline(priority, CREATED) == CREATED + timedelta(hours=hours)


def test_unknown_priority_uses_lenient_policy() -> None:
    assert SLACalculator.hours_for("whatever") == DEFAULT_SLA_HOURS == 120


def test_open_ticket_past_deadline_is_breached() -> None:
    ticket = _Ticket(TicketStatus.OPEN.value, CREATED)
    assert is_breached(ticket, CREATED + timedelta(seconds=1))
    assert not is_breached(ticket, CREATED)
    assert not is_breached(ticket, CREATED - timedelta(hours=1))


def test_in_progress_ticket_can_breach() -> None:
    ticket = _Ticket(TicketStatus.IN_PROGRESS, CREATED)
    assert is_breached(ticket, CREATED + timedelta(days=3))


def test_closed_ticket_is_never_breached() -> None:
    for status in (TicketStatus.CLOSED, TicketStatus.CLOSED.value):
        ticket = _Ticket(status, CREATED)
        assert not is_breached(ticket, CREATED + timedelta(days=365))


def test_naive_timestamps_are_read_as_utc() -> None:
    ticket = _Ticket(TicketStatus.OPEN, CREATED.replace(tzinfo=None))
    assert is_breached(ticket, CREATED + timedelta(minutes=1))
    assert not is_breached(ticket, (CREATED - timedelta(minutes=1)).replace(tzinfo=None))
