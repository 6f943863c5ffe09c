"""
==============================================================================
Authentication Service Module
==============================================================================

Admin login: verifies credentials and mints a session token.

Authentication Flow:
-------------------
    ┌─────────────┐
    │   Login     │
    │  Request    │
    └──────┬──────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │ Find User   │────▶│ User Not    │ → INVALID_CREDENTIALS
    └──────┬──────┘     │   Found     │
           │            └─────────────┘
    ┌──────▼──────┐     ┌─────────────┐
    │  Verify     │────▶│  Password   │ → INVALID_CREDENTIALS
    │  Password   │     │   Wrong     │
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │   Check     │────▶│  Account    │ → ACCOUNT_DISABLED
    │   Active    │     │  Disabled   │
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐
    │   Session   │
    │    Token    │
    └─────────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.config import get_settings
from app.core import exceptions
from app.core.security import SecurityManager, get_security_manager
from app.db.models import User


# Module logger
logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for the admin login.

    Example:
        >>> auth_service = AuthService(db_session)
        >>> user, token = auth_service.authenticate("admin", "admin123")
    """

    def __init__(
        self,
        db: Session,
        security: Optional[SecurityManager] = None
    ) -> None:
        self._db = db
        self._security = security or get_security_manager()
        self._settings = get_settings()

    def authenticate(self, username: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user with username and password.

        Args:
            username: Login name (case-insensitive)
            password: Plain text password

        Returns:
            Tuple of (User, session_token)

        Raises:
            AppException: INVALID_CREDENTIALS if user not found or password wrong
            AppException: ACCOUNT_DISABLED if user is inactive
        """
        normalized_username = username.lower().strip()

        user = self._db.query(User).filter(
            User.username == normalized_username
        ).first()

        if not user:
            logger.warning(f"Login failed: user not found - {normalized_username}")
            raise exceptions.invalid_credentials()

        if not self._security.verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password - {normalized_username}")
            raise exceptions.invalid_credentials()

        if not user.is_active:
            logger.warning(f"Login failed: account disabled - {normalized_username}")
            raise exceptions.account_disabled()

        token = self._security.create_session_token({
            "sub": user.id,
            "username": user.username,
        })

        logger.info(f"✅ Admin signed in: {user.username}")

        return user, token

    def get_token_expiry_seconds(self) -> int:
        return self._settings.session_expire_seconds
