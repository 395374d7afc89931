"""
SLA Domain Layer
================

Domain layer for SLA rules.

Contains:
- Domain Services: Stateless business logic (SLACalculator)

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.sla.domain.value_objects import (
    SLA_HOURS,
    DEFAULT_SLA_HOURS,
    SLACalculator,
    compute_deadline,
    is_breached,
)

__all__ = [
    "SLA_HOURS",
    "DEFAULT_SLA_HOURS",
    "SLACalculator",
    "compute_deadline",
    "is_breached",
]
