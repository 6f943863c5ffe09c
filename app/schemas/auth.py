"""
==============================================================================
Authentication Schemas Module
==============================================================================

Request and response schemas for the admin login.

==============================================================================
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """Login credentials."""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.lower().strip()


class UserInfo(BaseModel):
    """Basic user info for the session response."""
    id: str
    username: str

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    """Session token issued after a successful login."""
    success: bool = Field(default=True)
    access_token: str
    token_type: str = Field(default="bearer")
    expires_in: int
    user: UserInfo


class SessionStatusResponse(BaseModel):
    """Whether the caller holds a session."""
    success: bool = Field(default=True)
    authenticated: bool
    username: Optional[str] = None
    expires_at: Optional[datetime] = None
