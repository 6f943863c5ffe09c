"""
==============================================================================
Authentication Endpoints
==============================================================================

Admin login, logout and session presence.

The session token is returned in the body and also set as an HTTP-only
cookie so page navigations carry it.

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.dependencies import get_db, get_session_optional
from app.services.auth_service import AuthService
from app.schemas.auth import (
    LoginRequest,
    SessionResponse,
    SessionStatusResponse,
    UserInfo,
)
from app.schemas.common import MessageResponse
from app.store.remote import SessionInfo


router = APIRouter(prefix="/auth", tags=["Authentication"])


class AuthController:
    """Controller for authentication operations."""

    def __init__(self, db: Session):
        self._service = AuthService(db)
        self._settings = get_settings()

    def login(self, request: LoginRequest, response: Response) -> SessionResponse:
        """Authenticate the administrator and open a session."""
        user, token = self._service.authenticate(request.username, request.password)
        expires_in = self._service.get_token_expiry_seconds()

        response.set_cookie(
            key=self._settings.session_cookie_name,
            value=token,
            max_age=expires_in,
            httponly=True,
            samesite="lax",
            secure=self._settings.is_production,
        )

        return SessionResponse(
            access_token=token,
            expires_in=expires_in,
            user=UserInfo(id=user.id, username=user.username)
        )


@router.post("/login", response_model=SessionResponse)
async def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Authenticate and get a session token."""
    controller = AuthController(db)
    return controller.login(request, response)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Drop the session cookie."""
    response.delete_cookie(get_settings().session_cookie_name)
    return MessageResponse(message="Sesión cerrada")


@router.get("/session", response_model=SessionStatusResponse)
async def get_session_status(session: Optional[SessionInfo] = Depends(get_session_optional)):
    """Whether the caller is signed in."""
    if session is None:
        return SessionStatusResponse(authenticated=False)

    return SessionStatusResponse(
        authenticated=True,
        username=session.username,
        expires_at=session.expires_at
    )
