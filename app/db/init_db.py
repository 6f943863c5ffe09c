"""
==============================================================================
Database Initialization Module
==============================================================================

Database setup run at application startup.

Initialization Flow:
-------------------
1. Create all tables from ORM models
2. Create the default admin account if no user exists
3. Create the site configuration row if missing
4. Verify the connection

Usage:
------
    from app.db import init_db

    init_db()

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.security import get_security_manager
from app.db.database import DatabaseManager
from app.db.models import SiteConfiguration, User


# Module logger
logger = logging.getLogger(__name__)


DEFAULT_SITE_CONFIG: Dict[str, Any] = {
    "nombre_sitio": "Catálogo",
    "hero": {"titulo": "", "subtitulo": ""},
    "contacto": {"email": "", "telefono": "", "whatsapp": ""},
    "redes": {},
}


class DatabaseInitializer:
    """
    Database initialization manager.

    Example:
        >>> initializer = DatabaseInitializer()
        >>> initializer.initialize()
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        session: Optional[Session] = None
    ) -> None:
        """
        Args:
            db_manager: Optional DatabaseManager instance (singleton if None)
            session: Optional existing session (a new one per step if None)
        """
        self._db_manager = db_manager or DatabaseManager()
        self._security = get_security_manager()
        self._settings = get_settings()
        self._session = session

    def _get_session(self) -> Session:
        if self._session is not None:
            return self._session
        return self._db_manager.get_session()

    def _release(self, session: Session) -> None:
        if self._session is None:
            session.close()

    # =========================================================================
    # SETUP STEPS
    # =========================================================================

    def create_tables(self) -> None:
        """Create all database tables from ORM models (idempotent)."""
        logger.info("Creating database tables...")
        self._db_manager.create_tables()

    def create_default_admin(self) -> Optional[User]:
        """
        Create the default admin account if no user exists yet.

        Credentials come from DEFAULT_ADMIN_USERNAME and
        DEFAULT_ADMIN_PASSWORD.

        Returns:
            Created User, or None if an account already exists
        """
        session = self._get_session()

        try:
            if session.query(User).first() is not None:
                logger.info("Admin account already exists")
                return None

            admin_user = User(
                username=self._settings.default_admin_username.lower(),
                password_hash=self._security.hash_password(
                    self._settings.default_admin_password
                ),
                is_active=True
            )

            session.add(admin_user)
            session.commit()
            session.refresh(admin_user)

            logger.info(f"✅ Default admin user created: {admin_user.username}")
            logger.warning("⚠️ Please change the default admin password immediately!")

            return admin_user

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to create default admin: {e}")
            raise
        finally:
            self._release(session)

    def ensure_site_configuration(self) -> SiteConfiguration:
        """
        Create the singleton configuration row when missing.

        Returns:
            The existing or newly created row
        """
        session = self._get_session()

        try:
            row = session.get(SiteConfiguration, True)
            if row is not None:
                return row

            row = SiteConfiguration(id=True, config_json=dict(DEFAULT_SITE_CONFIG))
            session.add(row)
            session.commit()
            logger.info("✅ Default site configuration created")
            return row

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to create site configuration: {e}")
            raise
        finally:
            self._release(session)

    def initialize(self) -> None:
        """Perform full database initialization (startup entry point)."""
        logger.info("Initializing database...")

        self.create_tables()
        self.create_default_admin()
        self.ensure_site_configuration()

        if self._db_manager.verify_connection():
            logger.info("✅ Database connection verified")
        else:
            logger.warning("⚠️ Database connection check failed")


def init_db() -> None:
    """Initialize the database with tables, admin account and config row."""
    DatabaseInitializer().initialize()
