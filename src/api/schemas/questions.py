"""
Question lifecycle schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    """Schema for submitting a new question"""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=255, description="Question title")
    content: str = Field(..., min_length=1, description="Question body")
    is_public: bool = Field(
        default=True, alias="isPublic", description="Show in the public question feed"
    )
    is_anonymous: bool = Field(
        default=False, alias="isAnonymous", description="Hide the asker from readers"
    )


class AnswerSubmit(BaseModel):
    """Schema for a responder's answer"""

    answer: str = Field(..., description="Answer text; blank answers are rejected")


class AssignRequest(BaseModel):
    """Schema for admin-directed assignment"""

    model_config = ConfigDict(populate_by_name=True)

    responder_id: str = Field(..., alias="responderId", description="Responder to bind")


class PartyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None


class AnswerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    content: str
    created_at: datetime


class QuestionResponse(BaseModel):
    """Question as seen by the caller; ``asker`` is null for anonymous questions"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    status: str
    is_public: bool
    is_anonymous: bool
    asker: PartyOut | None = None
    responder: PartyOut | None = None
    answer: AnswerOut | None = None
    created_at: datetime
    assigned_at: datetime | None = None
    answered_at: datetime | None = None
    closed_at: datetime | None = None
    updated_at: datetime | None = None
