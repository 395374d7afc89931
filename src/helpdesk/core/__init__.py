"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from helpdesk.core.exceptions import (
    ErrorKind,
    ApplicationException,
    DomainException,
    ValidationException,
    AuthenticationException,
    PermissionDeniedException,
    ResourceNotFoundException,
    ConcurrencyConflictException,
)

__all__ = [
    "ErrorKind",
    "ApplicationException",
    "DomainException",
    "ValidationException",
    "AuthenticationException",
    "PermissionDeniedException",
    "ResourceNotFoundException",
    "ConcurrencyConflictException",
]
