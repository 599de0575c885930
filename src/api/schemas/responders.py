"""Pydantic schemas for responder administration and the responder directory."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ResponderCreate(BaseModel):
    """Request schema for provisioning a responder."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., min_length=1, max_length=128, alias="name")
    email: EmailStr = Field(..., description="Responder email address")
    password: str = Field(..., min_length=8, max_length=128)
    expertise: list[str] = Field(..., min_length=1, description="Tags from the expertise vocabulary")


class ResponderUpdate(BaseModel):
    """Request schema for updating a responder (all fields optional)."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: str | None = Field(None, min_length=1, max_length=128, alias="name")
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8, max_length=128)
    expertise: list[str] | None = Field(None, min_length=1)
    status: str | None = Field(None, description="active, inactive or suspended")


class ResponderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    email: str
    expertise: list[str]
    status: str
    created_at: datetime


class ResponderListResponse(BaseModel):
    count: int
    responders: list[ResponderResponse]


class ResponderMutationResponse(BaseModel):
    message: str
    responder: ResponderResponse


class DirectoryEntry(BaseModel):
    """What askers see when picking a responder."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    expertise: list[str]
