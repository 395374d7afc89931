"""
SLA Module
==========

Bounded Context for service level agreement rules.

Responsibilities:
- Compute a ticket's SLA deadline from its priority at creation time
- Derive the breach flag for a ticket on every read

Both are pure functions; nothing in this module touches storage.
"""

__version__ = "1.0.0"
