"""
Helpdesk Mini
=============

Ticket tracking helpdesk: accounts, tickets with SLA deadlines, and an
optimistic-locking update engine with an audit timeline.
"""

__version__ = "1.0.0"
