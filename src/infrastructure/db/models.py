from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class QuestionStatus(str, enum.Enum):
    """Canonical question workflow status.

    Note: Must use name='question_status' in Enum() to match database enum type.
    """

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    ANSWERED = "answered"
    CLOSED = "closed"

    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    @classmethod
    def open_statuses(cls) -> tuple[QuestionStatus, ...]:
        """Claimed but not yet answered."""
        return (cls.ASSIGNED, cls.IN_PROGRESS)

    @classmethod
    def resolved_statuses(cls) -> tuple[QuestionStatus, ...]:
        return (cls.ANSWERED, cls.CLOSED)


_STATUS_ORDER: tuple[QuestionStatus, ...] = tuple(QuestionStatus)


class ActivityType(str, enum.Enum):
    QUESTION = "question"
    STATUS_CHANGE = "status_change"
    ANSWER = "answer"


class UserStatus(str, enum.Enum):
    """User account status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class UserRole(str, enum.Enum):
    """User role enum matching auth.Role."""

    ASKER = "asker"
    RESPONDER = "responder"
    ADMIN = "admin"


class UserModel(Base):
    """SQLAlchemy model for users table (askers, responders and admins)."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [x.value for x in e]),
        default=UserRole.ASKER,
        nullable=False,
        index=True,
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status", values_callable=lambda e: [x.value for x in e]),
        default=UserStatus.ACTIVE,
        nullable=False,
    )
    # Only meaningful for responders; values come from EXPERTISE_AREAS
    expertise: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, role={self.role.value})>"


class QuestionModel(Base):
    """A question and its single authoritative workflow status.

    Only the lifecycle engine writes ``status``, ``responder_id`` and the
    answer columns.
    """

    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_status_responder", "status", "responder_id"),
        Index("ix_questions_public_created", "is_public", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    asker_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    responder_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    status: Mapped[QuestionStatus] = mapped_column(
        Enum(
            QuestionStatus,
            name="question_status",
            values_callable=lambda enum: [e.value for e in enum],
        ),
        default=QuestionStatus.PENDING,
        nullable=False,
        index=True,
    )
    is_public: Mapped[bool] = mapped_column(default=True, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(default=False, nullable=False)
    answer_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    answer_created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    answered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    asker: Mapped[UserModel] = relationship(foreign_keys=[asker_id], lazy="joined")
    responder: Mapped[UserModel | None] = relationship(foreign_keys=[responder_id], lazy="joined")


class ActivityModel(Base):
    """Append-only log of question status changes for the admin dashboard."""

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    question_id: Mapped[str | None] = mapped_column(
        ForeignKey("questions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    asker: Mapped[str] = mapped_column(String(255), nullable=False)  # display name or "Anonymous"
    responder_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    responder: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False, index=True
    )


__all__ = [
    "ActivityModel",
    "ActivityType",
    "QuestionModel",
    "QuestionStatus",
    "UserModel",
    "UserRole",
    "UserStatus",
]
