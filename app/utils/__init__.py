"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the application.

Modules:
--------
- validators: Catalog slug validation

==============================================================================
"""

from .validators import SlugValidator

__all__ = [
    "SlugValidator",
]
