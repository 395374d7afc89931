"""
Tickets Module
==============

Bounded Context for support tickets, their comments and their audit trail.

Responsibilities:
- Create tickets with an SLA deadline and a TICKET_CREATED timeline entry
- Apply status/assignment updates under optimistic locking, recording a
  STATUS_CHANGED timeline entry whenever the status actually changes
- List tickets (paginated, filtered, searched) and read ticket detail, each
  annotated with the SLA breach flag
- Append comments
"""

__version__ = "1.0.0"
