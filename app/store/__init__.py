"""
==============================================================================
Remote Store Package
==============================================================================

Query boundary of the hosted database used by the storefront.

==============================================================================
"""

from .remote import RemoteStore, SessionInfo, SqlRemoteStore

__all__ = [
    "RemoteStore",
    "SessionInfo",
    "SqlRemoteStore",
]
