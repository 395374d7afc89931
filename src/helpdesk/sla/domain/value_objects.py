"""
SLA Value Objects
==================

Pure SLA rules for the helpdesk.

The deadline is fixed once, at ticket creation, from the ticket priority.
The breach flag is never stored; it is derived on every read.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Protocol, Union

from helpdesk.config import Priority, TicketStatus

# Resolution window per priority, in hours
SLA_HOURS: Dict[Priority, int] = {
    Priority.HIGH: 24,
    Priority.MEDIUM: 72,
    Priority.LOW: 120,
}

# Unknown priorities fall back to the most lenient policy
DEFAULT_SLA_HOURS = SLA_HOURS[Priority.LOW]


class SupportsBreachCheck(Protocol):
    status: Any
    sla_deadline: datetime


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SLACalculator:
    """
    Pure functions for SLA calculations.

    Stateless utility class - all SLA calculation logic in one place.
    """

    @staticmethod
    def hours_for(priority: Union[Priority, str, None]) -> int:
        """Resolution window in hours for a priority (LOW policy if unrecognized)."""
        try:
            return SLA_HOURS[Priority(priority)]
        except ValueError:
            return DEFAULT_SLA_HOURS

    @staticmethod
    def compute_deadline(
        priority: Union[Priority, str, None],
        created_at: datetime
    ) -> datetime:
        """
        Calculate the SLA deadline for a ticket.

        Args:
            priority: Ticket priority (enum member or raw value)
            created_at: When the ticket was created

        Returns:
            created_at plus 24h (HIGH), 72h (MEDIUM) or 120h (LOW and anything else)
        """
        return created_at + timedelta(hours=SLACalculator.hours_for(priority))

    @staticmethod
    def is_breached(ticket: SupportsBreachCheck, now: datetime) -> bool:
        """
        Check whether a ticket is past its SLA deadline.

        A CLOSED ticket is never breached, whatever the timestamps say.
        """
        if ticket.status == TicketStatus.CLOSED:
            return False
        return _as_utc(now) > _as_utc(ticket.sla_deadline)


compute_deadline = SLACalculator.compute_deadline
is_breached = SLACalculator.is_breached
