"""
==============================================================================
Remote Store Boundary
==============================================================================

The storefront talks to its hosted database through three queries only:

- fetch_catalog(slug)   catalog row with nested items → products → images
- fetch_site_config()   the singleton configuration blob
- get_session(token)    whether an authenticated session exists

Responses are plain mappings shaped like the remote rows (Spanish column
names, nested relations under their table names). Consumers validate them
into their own snapshot models; this module never interprets them.

All methods are coroutines: they are the suspension points of the
storefront's single event loop.

==============================================================================
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core import exceptions
from app.core.security import SecurityManager, get_security_manager
from app.db.models import Catalog, CatalogItem, Product, SiteConfiguration, User


# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionInfo:
    """Opaque proof that an administrator is signed in."""

    user_id: str
    username: str
    expires_at: Optional[datetime] = None


class RemoteStore(abc.ABC):
    """Query boundary of the hosted database."""

    @abc.abstractmethod
    async def fetch_catalog(self, slug: str) -> Optional[Dict[str, Any]]:
        """Return the catalog row with nested relations, or None when absent."""

    @abc.abstractmethod
    async def fetch_site_config(self) -> Optional[Dict[str, Any]]:
        """Return the configuration blob, or None when the row is missing."""

    @abc.abstractmethod
    async def get_session(self, token: Optional[str]) -> Optional[SessionInfo]:
        """Return the session behind ``token``, or None."""


class SqlRemoteStore(RemoteStore):
    """
    RemoteStore over a SQLAlchemy session factory.

    Every call opens and closes its own session. Driver failures are
    re-raised as REMOTE_ERROR AppExceptions carrying the driver message.

    Example:
        >>> store = SqlRemoteStore(DatabaseManager().session_factory)
        >>> row = await store.fetch_catalog("verano-2025")
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        security: Optional[SecurityManager] = None
    ) -> None:
        self._session_factory = session_factory
        self._security = security or get_security_manager()

    async def fetch_catalog(self, slug: str) -> Optional[Dict[str, Any]]:
        session = self._session_factory()
        try:
            catalog = (
                session.query(Catalog)
                .options(
                    selectinload(Catalog.items)
                    .selectinload(CatalogItem.product)
                    .selectinload(Product.images)
                )
                .filter(Catalog.slug == slug)
                .first()
            )
            if catalog is None:
                logger.debug(f"No catalog row for slug {slug!r}")
                return None
            return catalog.to_remote()
        except SQLAlchemyError as e:
            logger.error(f"Catalog query failed for {slug!r}: {e}")
            raise exceptions.remote_error(str(e)) from e
        finally:
            session.close()

    async def fetch_site_config(self) -> Optional[Dict[str, Any]]:
        session = self._session_factory()
        try:
            row = session.get(SiteConfiguration, True)
            if row is None:
                return None
            return dict(row.config_json or {})
        except SQLAlchemyError as e:
            logger.error(f"Site configuration query failed: {e}")
            raise exceptions.remote_error(str(e)) from e
        finally:
            session.close()

    async def get_session(self, token: Optional[str]) -> Optional[SessionInfo]:
        if not token:
            return None

        payload = self._security.verify_token(token)
        if not payload or not payload.get("sub"):
            return None

        session = self._session_factory()
        try:
            user = session.get(User, payload["sub"])
        except SQLAlchemyError as e:
            logger.error(f"Session lookup failed: {e}")
            raise exceptions.remote_error(str(e)) from e
        finally:
            session.close()

        if user is None or not user.is_active:
            return None

        expires_at = None
        if "exp" in payload:
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

        return SessionInfo(user_id=user.id, username=user.username, expires_at=expires_at)
