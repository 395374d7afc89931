"""
Tickets Domain Entities
=======================

Pure Python domain objects for ticket updates and the audit trail.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from helpdesk.config import Priority, TicketStatus


class _Unset:
    """Marker for a patch field the caller did not send."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class TicketPatch:
    """
    Partial update of a ticket.

    ``status=None`` leaves the status alone. ``agent_id`` distinguishes
    "not sent" (UNSET, keep current) from an explicit ``None`` (unassign).
    """
    status: Optional[TicketStatus] = None
    agent_id: Union[int, None, _Unset] = UNSET

    @property
    def changes_agent(self) -> bool:
        return self.agent_id is not UNSET

    def apply(
        self,
        current_status: TicketStatus,
        current_agent_id: Optional[int]
    ) -> Tuple[TicketStatus, Optional[int]]:
        """Return the (status, agent_id) pair after this patch."""
        status = TicketStatus(self.status) if self.status is not None else current_status
        agent_id = self.agent_id if self.changes_agent else current_agent_id
        return status, agent_id


def is_well_formed_version(value: Any) -> bool:
    """Only real integers are accepted as a version token (bool is not one)."""
    return isinstance(value, int) and not isinstance(value, bool)


def ticket_created_details(priority: Priority) -> str:
    return f"Ticket created with priority {Priority(priority).value}"


def status_changed_details(old: TicketStatus, new: TicketStatus) -> str:
    return f"Status changed from {TicketStatus(old).value} to {TicketStatus(new).value}"
