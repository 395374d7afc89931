"""
Tickets Domain Layer
====================

Contains:
- Value Objects: TicketPatch (a partial status/assignment update)
- Domain rules: version well-formedness, timeline wording

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.tickets.domain.entities import (
    UNSET,
    TicketPatch,
    is_well_formed_version,
    status_changed_details,
    ticket_created_details,
)

__all__ = [
    "UNSET",
    "TicketPatch",
    "is_well_formed_version",
    "status_changed_details",
    "ticket_created_details",
]
