"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: AppException class and error factory functions
- security: SecurityManager for password hashing and session tokens
- context: StorefrontContext wiring the process-wide state objects
- dependencies: FastAPI dependency injection functions

Usage:
------
    from app.core import AppException
    from app.core import exceptions
    raise exceptions.catalog_not_found("verano")

==============================================================================
"""

from .exceptions import (
    AppException,
    register_exception_handlers,
)
from .security import SecurityManager, get_security_manager

__all__ = [
    "AppException",
    "register_exception_handlers",
    "SecurityManager",
    "get_security_manager",
]
