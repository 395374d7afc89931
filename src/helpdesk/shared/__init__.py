"""
Shared Kernel Module
====================

This module contains shared infrastructure used across all bounded contexts
(accounts, tickets, sla).

Architecture Pattern: Modular Monolith
- Each module (accounts, tickets, sla) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add ticket or account business logic to the shared kernel.
"""

__version__ = "1.0.0"
