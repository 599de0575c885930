"""Pydantic schemas for sign-up, sign-in and profile endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Asker self-registration. Any ``role`` sent by the client is ignored."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str | None = Field(None, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)


class TokenResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token TTL in seconds")


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str | None = None
    role: str = Field(..., description="asker, responder or admin")
    status: str
    expertise: list[str] = Field(default_factory=list, description="Responder expertise tags")
    created_at: datetime
    last_login_at: datetime | None = None


class SessionResponse(BaseModel):
    """Returned by register and login."""

    message: str
    user: AccountResponse
    tokens: TokenResponse


class MeResponse(BaseModel):
    user: AccountResponse


class MessageResponse(BaseModel):
    message: str
