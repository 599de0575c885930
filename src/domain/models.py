from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    name: str | None = None
    roles: list[str] = field(default_factory=list)

    def has_role(self, *roles: str) -> bool:
        return any(role in self.roles for role in roles)


@dataclass(slots=True)
class Party:
    """Public face of a user attached to a question (asker or responder)."""

    id: str
    name: str | None = None


@dataclass(slots=True)
class Answer:
    content: str
    created_at: datetime


@dataclass(slots=True)
class QuestionRecord:
    """Read model of a question as returned by the lifecycle engine.

    ``asker`` is None when the viewer is not allowed to see who asked.
    """

    id: str
    title: str
    content: str
    status: str
    is_public: bool
    is_anonymous: bool
    asker: Party | None
    responder: Party | None
    answer: Answer | None
    created_at: datetime
    assigned_at: datetime | None = None
    answered_at: datetime | None = None
    closed_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ResponderProfile:
    id: str
    name: str | None
    email: str
    expertise: list[str]
    status: str
    created_at: datetime


@dataclass(slots=True)
class ActivityEntry:
    id: str
    type: str
    question_id: str | None
    title: str
    asker: str
    responder_id: str | None
    responder: str | None
    status: str | None
    timestamp: datetime


@dataclass(slots=True)
class Account:
    """Stored identity as shown back to its owner."""

    id: str
    email: str
    full_name: str | None
    role: str
    status: str
    expertise: list[str]
    created_at: datetime
    last_login_at: datetime | None = None


@dataclass(slots=True)
class IssuedTokens:
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"
