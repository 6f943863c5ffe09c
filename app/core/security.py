"""
==============================================================================
Security Module - Sessions & Cryptography
==============================================================================

Security management for administrator sessions.

This module implements:
- SecurityManager: Singleton class for all security operations
- Session token generation and verification (JWT)
- Password hashing using bcrypt

Token Structure:
---------------
{
    "sub": "user-uuid",           # Subject (user ID)
    "username": "admin",          # Username for convenience
    "type": "session",            # Token type
    "exp": 1234567890,            # Expiration timestamp
    "iat": 1234567890             # Issued at timestamp
}

==============================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings


# Module logger
logger = logging.getLogger(__name__)


class SecurityManager:
    """
    Centralized security manager for session operations.

    Handles password hashing with bcrypt and the signing and
    verification of session tokens.

    Example:
        >>> security = SecurityManager()
        >>> hashed = security.hash_password("secret123")
        >>> security.verify_password("secret123", hashed)
        True
        >>> token = security.create_session_token({"sub": "user-id"})
        >>> security.verify_token(token)["sub"]
        'user-id'
    """

    TOKEN_TYPE_SESSION = "session"

    BCRYPT_SCHEMES = ["bcrypt"]
    BCRYPT_DEPRECATED = "auto"

    def __init__(self) -> None:
        """Set up the password hashing context and load settings."""
        self._pwd_context = CryptContext(
            schemes=self.BCRYPT_SCHEMES,
            deprecated=self.BCRYPT_DEPRECATED
        )
        self._settings = get_settings()

        logger.debug("SecurityManager initialized")

    # =========================================================================
    # PASSWORD HASHING METHODS
    # =========================================================================

    def hash_password(self, plain_password: str) -> str:
        """
        Hash a plain text password using bcrypt.

        Raises:
            ValueError: If the password is empty
        """
        if not plain_password:
            raise ValueError("Password cannot be empty")

        return self._pwd_context.hash(plain_password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain text password against a bcrypt hash.

        Returns:
            True if password matches, False otherwise (including
            malformed hashes)
        """
        try:
            return self._pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification error: {type(e).__name__}")
            return False

    # =========================================================================
    # SESSION TOKENS
    # =========================================================================

    def create_session_token(
        self,
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a signed session token.

        Args:
            data: Payload data (must include 'sub' for user ID)
            expires_delta: Custom expiration time (optional)

        Returns:
            Encoded JWT string
        """
        payload = data.copy()

        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(
            minutes=self._settings.session_expire_minutes
        ))

        payload.update({
            "type": self.TOKEN_TYPE_SESSION,
            "exp": expire,
            "iat": now
        })

        encoded_token = jwt.encode(
            payload,
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm
        )

        logger.debug(f"Created session token, expires: {expire.isoformat()}")

        return encoded_token

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode a session token.

        Validates signature, expiration and token type.

        Returns:
            Decoded payload dictionary if valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm]
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Token verification failed: token expired")
            return None
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            return None

        if payload.get("type") != self.TOKEN_TYPE_SESSION:
            logger.warning(
                f"Token type mismatch: expected {self.TOKEN_TYPE_SESSION}, "
                f"got {payload.get('type')}"
            )
            return None

        return payload


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_security_manager() -> SecurityManager:
    """
    Get the global SecurityManager instance (singleton pattern).

    Returns:
        Global SecurityManager instance
    """
    return SecurityManager()
